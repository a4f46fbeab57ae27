# topmark:header:start
#
#   project      : ShellConf
#   file         : __init__.py
#   file_relpath : src/shellconf/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ShellConf CLI subcommands (one module per command)."""
