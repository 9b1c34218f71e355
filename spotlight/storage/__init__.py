"""Remote persistence of edited images."""

from .persistence import PersistenceClient, PersistenceFailure, PersistenceResult, build_payload

__all__ = ['PersistenceClient', 'PersistenceFailure', 'PersistenceResult', 'build_payload']
