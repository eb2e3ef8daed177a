"""Blocks2Rego code generator

Translates a workspace of typed blocks into Rego source text.
"""

from blocks2rego.core.block import Block, Workspace, BlockType
from blocks2rego.core.options import GeneratorOptions
from blocks2rego.generators.code_generator import CodeGenerator, workspace_to_code

__all__ = [
    'Block',
    'Workspace',
    'BlockType',
    'GeneratorOptions',
    'CodeGenerator',
    'workspace_to_code',
]

__version__ = "0.1.0"
