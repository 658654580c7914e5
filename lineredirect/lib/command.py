# This software is released under the Revised BSD License.
# See LICENSE for details
#
# Copyright (c) 2019, Ryan Chapin, https//:www.ryanchapin.com
# All rights reserved.

import shlex
from typing import List, Tuple

from invoke import Result, run

from lineredirect.lib.enums import LogLevel, RunResult
from lineredirect.lib.linestream import DEFAULT_ENCODING, TextLineWriter
from lineredirect.lib.logging import Logger, LogStreamer

COMPONENT_OUT = "command_out"
COMPONENT_ERR = "command_err"

# invoke decodes child output with this codec; it maps every byte to one character and back, so
# the line streams receive the child's exact bytes and decode them with the configured encoding.
TRANSPORT_ENCODING = "latin-1"


class Command(object):
    """
    Runs a shell command and logs its stdout and stderr one line at a time.
    """

    def __init__(
        self,
        logger: Logger,
        command: str,
        args: List[str] | None = None,
        encoding: str | object = DEFAULT_ENCODING,
        stdout_level: str = LogLevel.INFO.value,
        stderr_level: str = LogLevel.ERROR.value,
    ):
        self.logger = logger
        self.command = command
        self.args = args
        self.encoding = encoding
        self.stdout_level = stdout_level
        self.stderr_level = stderr_level

    def get_cmd(self) -> str:
        args = " ".join(shlex.quote(a) for a in self.args) if self.args else None
        return f"{self.command} {args}" if args else self.command

    def run(self) -> Tuple[RunResult, Result | None]:
        cmd = self.get_cmd()
        out_streamer = LogStreamer(self.logger, COMPONENT_OUT, self.stdout_level, self.encoding)
        err_streamer = LogStreamer(self.logger, COMPONENT_ERR, self.stderr_level, self.encoding)
        out_stream = TextLineWriter(out_streamer, TRANSPORT_ENCODING)
        err_stream = TextLineWriter(err_streamer, TRANSPORT_ENCODING)

        self.logger.info("running command", cmd=cmd)
        try:
            result = run(
                cmd,
                warn=True,
                in_stream=False,
                encoding=TRANSPORT_ENCODING,
                out_stream=out_stream,
                err_stream=err_stream,
            )
        finally:
            # Log any trailing output that was not terminated with a newline.
            try:
                out_stream.close()
            finally:
                err_stream.close()

        run_result = RunResult.FAIL
        if result and result.ok:
            run_result = RunResult.SUCCESS
        self.logger.info(
            "command finished",
            cmd=cmd,
            exited=result.exited if result else None,
            run_result=run_result.value,
        )
        return run_result, result
