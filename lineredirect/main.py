# This software is released under the Revised BSD License.
# See LICENSE for details
#
# Copyright (c) 2019, Ryan Chapin, https//:www.ryanchapin.com
# All rights reserved.

import sys

from lineredirect.lib.command import Command
from lineredirect.lib.config import Config
from lineredirect.lib.enums import RunResult
from lineredirect.lib.logging import get_logger


def main() -> int:
    # Logs go to the console at info until the config tells us otherwise.
    logger = get_logger(__name__, "info")
    try:
        configs = Config.from_env()
        logger = get_logger(__name__, configs["log_level"], force_reconfig=True)
        command = Command(
            logger,
            configs["command"],
            args=configs["args"],
            encoding=configs["encoding"],
            stdout_level=configs["stdout_level"],
            stderr_level=configs["stderr_level"],
        )
        run_result, _ = command.run()
    except Exception as e:
        # Dump the entire stack trace as we do not expect this case.
        logger.exception(e)
        return 1

    logger.info("Exiting main", run_result=run_result.value)
    return 0 if run_result == RunResult.SUCCESS else 1


if __name__ == "__main__":
    sys.exit(main())
