"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, MutableMapping

from .training_data import TrainingData


@dataclass(frozen=True)
class DatasetSpec:
    """A dataset registered in the system.

    Attributes
    ----------
    name:
        Registry identifier.
    data:
        The examples, ready to be scaled, shuffled and split.
    provenance:
        Where the data came from and the options used to build it.  Written
        to the run manifest so experiments remain reproducible.
    """

    name: str
    data: TrainingData
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return int(self.data[0].inputs.shape[0])

    @property
    def d_out(self) -> int:
        return int(self.data[0].expected.shape[0])

    @property
    def labels(self) -> list[str] | None:
        return self.data.labels


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def build_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", build_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Return the :class:`DatasetSpec` for ``dataset``."""

    if dataset not in _REGISTRY:
        raise KeyError(f"Unknown dataset: {dataset}")
    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if len(spec.data) == 0:
        raise ValueError(f"Dataset {spec.name!r} is empty")
    d_in, d_out = spec.d_in, spec.d_out
    for idx, datum in enumerate(spec.data):
        if datum.inputs.shape[0] != d_in or datum.expected.shape[0] != d_out:
            raise ValueError(f"Example {idx} of {spec.name!r} has inconsistent dimensions")
    if spec.labels is not None and len(spec.labels) != d_out:
        raise ValueError(f"Dataset {spec.name!r} has {len(spec.labels)} labels for {d_out} outputs")


__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
