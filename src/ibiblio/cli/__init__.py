"""
ibiblio CLI package.

Commands live in ``cli/commands/`` and are discovered automatically. Each
command module defines ``SUMMARY``, ``register_args(parser)`` and
``main(args) -> int``.
"""
from ._output import OutputFormatter
from ._args import (
    add_json_flag,
    add_module_args,
    add_repo_root_flag,
    add_resolver_flags,
    add_standard_flags,
)
from ._utils import build_resolver, get_repo_root

__all__ = [
    "OutputFormatter",
    "add_json_flag",
    "add_module_args",
    "add_repo_root_flag",
    "add_resolver_flags",
    "add_standard_flags",
    "build_resolver",
    "get_repo_root",
]
