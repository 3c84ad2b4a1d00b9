from importlib import import_module

modules = [
    'documents',
    'transitions',
    'revisions',
    'curation',
    'reviews',
    'statistics',
]

for m in modules:
    import_module(f'.{m}', __name__)

__all__ = modules
