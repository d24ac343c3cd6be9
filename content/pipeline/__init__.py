"""
Content transformation pipeline.

Import the entry points from ``content.pipeline.renderer``; this package
module stays empty so ``content.media`` can use the config without pulling in
the processors.
"""
