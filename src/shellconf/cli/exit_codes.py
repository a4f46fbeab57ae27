# topmark:header:start
#
#   project      : ShellConf
#   file         : exit_codes.py
#   file_relpath : src/shellconf/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the ShellConf CLI.

ShellConf aligns with the BSD `sysexits` convention so scripts driving the shell's
configuration can tell a typo in a path from a rejected value or a broken file.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the ShellConf CLI.

    Attributes:
        SUCCESS: Successful execution.
        FAILURE: Generic failure; prefer a more specific code.
        USAGE_ERROR: Invalid invocation or malformed dotted path. Mirrors BSD
            ``EX_USAGE (64)``.
        DATA_ERROR: A value or the configuration violates the schema. Mirrors BSD
            ``EX_DATAERR (65)``.
        NOT_FOUND: Unknown path, or an imported file does not exist. Mirrors BSD
            ``EX_NOINPUT (66)``.
        SOFTWARE: Internal error (engine used in the wrong state). Mirrors BSD
            ``EX_SOFTWARE (70)``.
        IO_ERROR: A document cannot be read or written. Mirrors BSD ``EX_IOERR (74)``.
        TEMP_FAILURE: The reload did not finish in time; retrying may succeed. Mirrors
            BSD ``EX_TEMPFAIL (75)``.
        CONFIG_ERROR: A configuration or schema document is malformed (syntax, import
            cycle). Mirrors BSD ``EX_CONFIG (78)``.
        UNEXPECTED_ERROR: Unhandled/unknown error (last resort).
    """

    SUCCESS = 0
    FAILURE = 1

    USAGE_ERROR = 64  # EX_USAGE
    DATA_ERROR = 65  # EX_DATAERR
    NOT_FOUND = 66  # EX_NOINPUT
    SOFTWARE = 70  # EX_SOFTWARE
    IO_ERROR = 74  # EX_IOERR
    TEMP_FAILURE = 75  # EX_TEMPFAIL
    CONFIG_ERROR = 78  # EX_CONFIG

    UNEXPECTED_ERROR = 255
