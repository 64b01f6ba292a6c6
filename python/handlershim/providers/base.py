import abc
import os
import pathlib
from typing import Optional, Sequence, Tuple

from handlershim.core.loader import LoadedModule


def _absolute_dirs(dirs: Sequence[os.PathLike], base_dir: Optional[os.PathLike]) -> Tuple[pathlib.Path, ...]:
    resolved = []
    for d in dirs:
        p = pathlib.Path(d)
        if not p.is_absolute() and base_dir is not None:
            p = pathlib.Path(base_dir, p)
        resolved.append(p.resolve())
    return tuple(resolved)


class HandlerProvider(abc.ABC):
    """Source of a loaded unit.

    Subclasses are registered under a scheme with
    :func:`handlershim.providers.registry.provider` and are constructed with
    the location part of a target plus keyword-only ``base_dir``,
    ``search_paths`` and ``evaluator``.
    """

    scheme: str = ""

    @abc.abstractmethod
    async def load(self) -> LoadedModule:
        """Evaluate the unit and return its result."""

    @property
    @abc.abstractmethod
    def location(self) -> str:
        """Human readable location of the unit."""

    def __repr__(self):
        return f"{type(self).__name__}({self.scheme}:{self.location})"
