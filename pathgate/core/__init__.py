"""Core functionality for pathgate: errors, configuration and logging.

Import from the submodules directly (``pathgate.core.config``,
``pathgate.core.errors``, ``pathgate.core.logging``); this package does not
re-export them so that ``pathgate.policy`` can depend on ``pathgate.core.errors``
without pulling in the configuration models.
"""
