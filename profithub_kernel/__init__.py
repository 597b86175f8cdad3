"""
profithub_kernel -- shared core of the SynchroProfitHub analytics stack.

Money and record value types, typed exceptions, structured logging, the
injectable clock, and the SQLAlchemy base/engine/selector infrastructure
used by the outer layers.  The kernel never imports profithub_engines,
profithub_config or profithub_modules.
"""

__version__ = "0.1.0"
