# This software is released under the Revised BSD License.
# See LICENSE for details
#
# Copyright (c) 2019, Ryan Chapin, https//:www.ryanchapin.com
# All rights reserved.

import codecs
import os
from typing import Dict

import yaml

from lineredirect.lib.enums import LogLevel
from lineredirect.lib.linestream import default_encoding

ENV_VAR_PREFIX = "LINEREDIRECT"
ENV_VAR_CONFIG = "CONFIG"
ENV_VAR_LOGLEVEL = "LOGLEVEL"

CONFIG_ENV_VAR_KEY = f"{ENV_VAR_PREFIX}_{ENV_VAR_CONFIG}"
LOGLEVEL_ENV_VAR_KEY = f"{ENV_VAR_PREFIX}_{ENV_VAR_LOGLEVEL}"

DEFAULTS = {
    "args": [],
    "encoding": None,
    "log_level": LogLevel.INFO.value,
    "stdout_level": LogLevel.INFO.value,
    "stderr_level": LogLevel.ERROR.value,
}

LEVEL_KEYS = ("log_level", "stdout_level", "stderr_level")


class Config(object):

    @staticmethod
    def get_env_vars(prefix: str = ENV_VAR_PREFIX) -> Dict:
        return {k: v for k, v in os.environ.items() if k.startswith(prefix)}

    @staticmethod
    def load_configs(config: str) -> Dict:
        with open(config, "r") as fh:
            return yaml.load(fh, Loader=yaml.FullLoader)

    @staticmethod
    def validate(configs: Dict | None) -> Dict:
        """
        Fill in defaults and check the values of a loaded config.

        Args:
            configs (dict): The configs as loaded from the yaml file.

        Returns:
            dict: A new dict with every supported key present.
        """
        if not isinstance(configs, dict):
            raise Exception(f"config must be a mapping; configs={configs}")

        retval = {**DEFAULTS, **configs}
        if not retval.get("command"):
            raise Exception("config is missing required key; key=command")

        args = retval["args"]
        if args is None:
            retval["args"] = []
        elif not isinstance(args, list):
            raise Exception(f"config args must be a list; args={args}")
        else:
            retval["args"] = [str(a) for a in args]

        for key in LEVEL_KEYS:
            level = LogLevel.get_enum_value_from_string(retval[key])
            if level is None:
                raise Exception(f"invalid log level; key={key}, value={retval[key]}")
            retval[key] = level.value

        if retval["encoding"] is None:
            retval["encoding"] = default_encoding()
        try:
            codecs.lookup(retval["encoding"])
        except LookupError:
            raise Exception(f"unknown encoding; encoding={retval['encoding']}")

        return retval

    @staticmethod
    def from_env() -> Dict:
        """
        Load and validate the config file named by the LINEREDIRECT_CONFIG env var, applying the
        LINEREDIRECT_LOGLEVEL override when it is set.
        """
        env_vars = Config.get_env_vars(ENV_VAR_PREFIX)
        if CONFIG_ENV_VAR_KEY not in env_vars:
            raise Exception(
                "Required env var defining path to config file is not defined; "
                f"export {CONFIG_ENV_VAR_KEY} pointing to path of a valid config file"
            )
        configs = Config.load_configs(env_vars[CONFIG_ENV_VAR_KEY])
        if isinstance(configs, dict) and LOGLEVEL_ENV_VAR_KEY in env_vars:
            configs["log_level"] = env_vars[LOGLEVEL_ENV_VAR_KEY]
        return Config.validate(configs)
