"""persistkit - persistence abstraction layer for object mappers.

Provides the annotation-driven mapping driver, reflection and registry
contracts, and lifecycle event arguments shared by persistence engines.
"""

__version__ = "0.1.0"
