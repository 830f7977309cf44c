APP_NAME = "nimbus"

DEFAULT_SERVER_URL = "http://localhost:1337/parse"
