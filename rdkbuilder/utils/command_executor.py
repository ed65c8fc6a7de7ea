import subprocess
from ..cli_logger import logger

# Shell conventions for "command not found" and "timed out".
COMMAND_NOT_FOUND = 127
COMMAND_TIMED_OUT = 124

def run_shell_command(command, env=None, input_data=None, cwd=None, timeout=None):
    """
    Executes a command and captures its output.

    Args:
        command (list): The command to execute as a list of strings.
        env (dict, optional): A dictionary of environment variables.
        input_data (str, optional): Data to be passed to the command's stdin.
        cwd (str, optional): The working directory for the command.
        timeout (float, optional): Seconds to wait before the command is killed.

    Returns:
        A tuple (stdout, stderr, return_code). A missing executable yields
        COMMAND_NOT_FOUND and an expired timeout yields COMMAND_TIMED_OUT.
    """
    logger.debug(f"Running: {' '.join(str(part) for part in command)}")
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            env=env,
            input=input_data,
            check=False,
            cwd=cwd,
            timeout=timeout,
        )
        return result.stdout, result.stderr, result.returncode

    except FileNotFoundError as e:
        logger.debug(f"Command not found: {e.filename}")
        return "", str(e), COMMAND_NOT_FOUND
    except subprocess.TimeoutExpired as e:
        logger.warning(f"Command timed out after {timeout}s: {' '.join(str(part) for part in command)}")
        return "", str(e), COMMAND_TIMED_OUT
