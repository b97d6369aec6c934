"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

from common.types import ExpiryUnit

COMMANDS = ["upload", "config", "clear", "exit", "help"]

UPLOAD_OPTIONS = ["--password", "--expires", "--name"]

EXPIRY_UNITS = ExpiryUnit.names()

STYLE = Style.from_dict(
    {
        "prompt": "#2E9E6B bold",
        "command": "#0088ff bold",
    }
)

SEA_GREEN = "\033[38;2;46;158;107m"
GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"

LOGO = f"""{SEA_GREEN}
      _                 _                     _
  ___| |__  _   _ _ __ | | ___ __   ___  ___| |_
 / __| '_ \\| | | | '_ \\| |/ / '_ \\ / _ \\/ __| __|
| (__| | | | |_| | | | |   <| |_) | (_) \\__ \\ |_
 \\___|_| |_|\\__,_|_| |_|_|\\_\\ .__/ \\___/|___/\\__|
                            |_|
{RESET}"""

WELCOME_TITLE = "chunkpost - chunked file uploads"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "chunkpost> "

HELP_TEXT = f"""Available commands:
  upload <path> [options]             Upload a file in chunks
      --password <password>           Protect the download with a password
      --expires <n> <unit>            Keep the file for n units ({', '.join(EXPIRY_UNITS)})
      --name <filename>               Store under a different name
  config                              Show current configuration
  config <key> <value>                Change a configuration value
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  upload ~/videos/talk.mp4
  upload report.pdf --expires 3 hours --password hunter2
  config chunk_size 1048576
  config timeout none
  config server_host files.example.com"""
