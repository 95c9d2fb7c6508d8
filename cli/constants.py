"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["estimate", "cid", "store", "mint", "network", "clear", "exit", "help"]
FILE_COMMANDS = ("estimate", "cid", "store", "mint")

STYLE = Style.from_dict(
    {
        "prompt": "#2BD9FE bold",
        "command": "#0088ff bold",
    }
)

CYAN = "\033[38;2;43;217;254m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{CYAN}
     _     _ _   _                  _   ___
 ___| |_  |_| |_| |_    ___ ___ ___| |_|  _|___
| . | . | | | '_|  _|  | . |   |  _|   |  _|_ -|
|___|___|_| |_,_|_|    |___|_|_|___|_|_|_| |___|
        |___|
{RESET}"""

WELCOME_TITLE = "onchfs minter - store files on-chain and mint them"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "onchfs> "

HELP_TEXT = """Available commands:
  estimate <file>                          Show chunk count and estimated storage cost
  cid <file> [media-type]                  Compute the file CID offline
  store <file> [media-type]                Upload chunks and create the file inode
  mint <file> <collection> key=value...    Store the file and mint a token on <collection>
  network [mainnet|ghostnet]               Show or switch network
  clear                                    Clear screen and redisplay welcome message
  help                                     Show this help
  exit                                     Exit REPL

mint options:
  name=<text>              Token name (required)
  description=<text>       Token description (required)
  royalties=<0-100>        Creator royalty percentage (default 10)
  tags=<a,b,c>             Comma-separated tags
  attr:<name>=<value>      Attribute, repeatable
  license=<text>           License (default "No License / All Rights Reserved")
  editions=<n>|open        Fixed edition count (default 1) or open edition
  type=<media-type>        Media type (guessed from the file name if omitted)

Examples:
  estimate art/piece.png
  cid art/piece.png image/png
  mint art/piece.png KT1... name="Piece" description="First piece" editions=5 tags=gen,art
  mint art/loop.html KT1... name=Loop description="Open loop" editions=open attr:palette=warm"""
