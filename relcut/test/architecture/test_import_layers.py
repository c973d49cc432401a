from __future__ import annotations

import pytest

from relcut.test.architecture._gate import require_arch_checks_enabled
from relcut.test.architecture._utils import iter_source_files, parse_imports, relcut_root

# Lower layers never import the layers listed for them.
_FORBIDDEN = {
    "core": ("relcut.git", "relcut.release", "relcut.publish", "relcut.output", "relcut.cli"),
    "platform": ("relcut.git", "relcut.release", "relcut.publish", "relcut.cli"),
    "git": ("relcut.release", "relcut.publish", "relcut.cli"),
    "release": ("relcut.publish", "relcut.cli", "typer"),
    "publish": ("relcut.release", "relcut.cli", "typer"),
}


@pytest.mark.parametrize("layer", sorted(_FORBIDDEN))
def test_layer_imports(layer: str) -> None:
    require_arch_checks_enabled()

    root = relcut_root()
    offenders: list[str] = []
    for file_path in iter_source_files():
        rel = file_path.relative_to(root)
        if rel.parts[0] != layer:
            continue
        for ref in parse_imports(file_path):
            if ref.module.startswith(_FORBIDDEN[layer]):
                offenders.append(f"{rel.as_posix()}:{ref.line}: imports {ref.module}")

    assert not offenders, "Layering violations:\n" + "\n".join(offenders)


def test_rich_is_confined_to_console() -> None:
    require_arch_checks_enabled()

    root = relcut_root()
    offenders = [
        f"{path.relative_to(root).as_posix()}:{ref.line}"
        for path in iter_source_files()
        if path.relative_to(root).as_posix() != "output/console.py"
        for ref in parse_imports(path)
        if ref.module == "rich" or ref.module.startswith("rich.")
    ]

    assert not offenders, "rich imported outside output/console.py:\n" + "\n".join(offenders)
