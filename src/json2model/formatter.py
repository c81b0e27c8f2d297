# formatter.py
import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

DART_EXECUTABLE_NAME = "dart"
FORMAT_TIMEOUT_SECONDS = 60


def find_dart_executable():
    return shutil.which(DART_EXECUTABLE_NAME) # Searches PATH


def format_source(source, dart_executable=None):
    """
    Pipes generated source through 'dart format'. When the SDK is missing or the
    formatter rejects the input, the source is returned unchanged with a warning.
    """
    dart_executable = dart_executable or find_dart_executable()
    if not dart_executable:
        logger.warning("'dart' not found in PATH, leaving generated code unformatted.")
        return source

    cmd = [dart_executable, "format", "--output=show", "--summary=none"]
    try:
        result = subprocess.run(cmd, input=source, capture_output=True, text=True,
                                encoding='utf-8', errors='replace', timeout=FORMAT_TIMEOUT_SECONDS)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"dart format failed to run: {e}. Leaving generated code unformatted.")
        return source

    if result.returncode != 0:
        logger.warning(f"dart format exited with {result.returncode}, leaving generated code unformatted.\n"
                       f"--- dart format stderr ---:\n{result.stderr}")
        return source
    return result.stdout
