import importlib

MODULES = [
    'depthcrawl.config',
    'depthcrawl.exceptions',
    'depthcrawl.domain',
    'depthcrawl.db.engine',
    'depthcrawl.db.models',
    'depthcrawl.repository.pages',
    'depthcrawl.services.crawler',
    'depthcrawl.services.elasticsearch_indexer',
    'depthcrawl.services.scheduler_service',
    'depthcrawl.api.server',
    'depthcrawl.container',
]

def test_imports():
    for m in MODULES:
        importlib.import_module(m)
