import importlib

CORE_MODULES = [
    "fwembed",
    "fwembed.analyzer",
    "fwembed.cli",
    "fwembed.compiler",
    "fwembed.embedder",
    "fwembed.errors",
    "fwembed.installer",
    "fwembed.merger",
    "fwembed.models",
    "fwembed.observability",
    "fwembed.toolchain",
]


def test_core_package_layout_modules_importable() -> None:
    for module_name in CORE_MODULES:
        module = importlib.import_module(module_name)
        assert module is not None
