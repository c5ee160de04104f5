"""
Generators — produce target-language bindings from a resolved WIT world.

Each generator module exposes a pure function taking the resolved world
model and the ``GeneratorConfig`` and returning the source text.
"""
