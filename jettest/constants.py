"""Application metadata shown by the CLI."""

APP_NAME = "JetTest"

APP_VERSION = "0.1.0"

APP_DESCRIPTION = (
    "JetTest is a versatile command-line application that allows you to execute "
    "API tests defined in YAML configuration files."
)

APP_COPYRIGHT = (
    "Apache-2.0 license\n"
    "For more information, visit the GitHub repository: "
    "https://github.com/itpey/jettest"
)

APP_BANNER = r"""_______________________________________________________
______  /__  ____/__  __/__  __/__  ____/_  ___/__  __/
___ _  /__  __/  __  /  __  /  __  __/  _____ \__  /
/ /_/ / _  /___  _  /   _  /   _  /___  ____/ /_  /
\____/  /_____/  /_/    /_/    /_____/  /____/ /_/

"""
