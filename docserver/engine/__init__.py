"""Update pipeline components.

- sanitize: project path -> URL slug
- registry: slug -> Project table built from configuration
- synchronizer: fast-forward-only git updates
- dispatcher: per build system documentation builds
- driver: runs synchronizer then dispatcher for every project

Import directly from submodules:
    from docserver.engine.registry import build_registry
    from docserver.engine.driver import UpdateDriver
"""
