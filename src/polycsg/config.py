"""YAML configuration for polyCSG.

A configuration file looks like::

    tolerance:
      plane_epsilon: 1.0e-4
      weld_precision: 1.0e-7
    logging:
      level: DEBUG
      file: polycsg.log

Both sections are optional.  :func:`load_config` applies them to
:mod:`polycsg.tolerance` and :mod:`polycsg.log` and returns the parsed
mapping.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict

from polycsg import tolerance
from polycsg.log import setup_logging

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'POLYCSG_CONFIG'


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    """Load and apply a YAML configuration file.

    If ``path`` is None the ``POLYCSG_CONFIG`` environment variable is
    consulted; if that is unset too, nothing is applied and an empty
    dict is returned.  An explicitly named file that does not exist
    raises ``FileNotFoundError``.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return {}
        path = env_path

    import yaml

    with open(path, 'r', encoding='utf-8') as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f'configuration file {path} must contain a mapping')

    apply_config(data)
    return data


def apply_config(data: Dict[str, Any]) -> None:
    """apply an already-parsed configuration mapping"""
    for key in data:
        if key not in ('tolerance', 'logging'):
            logger.warning('ignoring unknown configuration section %r', key)

    tol = data.get('tolerance') or {}
    if tol:
        if not isinstance(tol, dict):
            raise ValueError('tolerance section must be a mapping')
        tolerance.configure(**{k: float(v) for k, v in tol.items()})
        logger.debug('tolerances now %s', tolerance.current())

    log_cfg = data.get('logging') or {}
    if log_cfg:
        if not isinstance(log_cfg, dict):
            raise ValueError('logging section must be a mapping')
        setup_logging(level=log_cfg.get('level', logging.INFO),
                      log_file=log_cfg.get('file'))


__all__ = ['CONFIG_ENV_VAR', 'load_config', 'apply_config']
