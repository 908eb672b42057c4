from typing import Any, Callable, Dict, List
from imgchain.domain.interfaces import IProcessor
from imgchain.features.processing.processors import (
    DefaultProcessor,
    ResizingProcessor,
    RoundCornerProcessor,
    chain,
)
from imgchain.kernel.image.validation import validate_float, validate_size
from imgchain.kernel.system.logging import get_logger

logger = get_logger("registry")

ProcessorFactory = Callable[[Dict[str, Any]], IProcessor]


def _build_default(params: Dict[str, Any]) -> IProcessor:
    return DefaultProcessor()


def _build_round_corner(params: Dict[str, Any]) -> IProcessor:
    if "corner_radius" not in params:
        raise ValueError("round_corner requires 'corner_radius'")
    radius = validate_float(params["corner_radius"], float("nan"))
    target_size = params.get("target_size")
    size = validate_size(target_size)
    if target_size is not None and size is None:
        raise ValueError(f"Invalid target_size: {target_size!r}")
    return RoundCornerProcessor(corner_radius=radius, target_size=size)


def _build_resize(params: Dict[str, Any]) -> IProcessor:
    size = validate_size(params.get("target_size"))
    if size is None:
        raise ValueError(f"resize requires a valid 'target_size', got {params.get('target_size')!r}")
    return ResizingProcessor(target_size=size)


PROCESSOR_REGISTRY: Dict[str, ProcessorFactory] = {
    "default": _build_default,
    "round_corner": _build_round_corner,
    "resize": _build_resize,
}


def register_processor(name: str, factory: ProcessorFactory) -> None:
    """
    Makes a processor type available to build_processor() under `name`.
    """
    if name in PROCESSOR_REGISTRY:
        logger.warning(f"Replacing registered processor type '{name}'")
    PROCESSOR_REGISTRY[name] = factory


def build_processor(spec: Dict[str, Any]) -> IProcessor:
    """
    Builds one processor from a {"type": ..., **params} mapping.
    Raises KeyError for unknown types and ValueError for bad parameters.
    """
    kind = spec.get("type")
    if kind not in PROCESSOR_REGISTRY:
        raise KeyError(f"Unknown processor type: {kind!r}")
    params = {k: v for k, v in spec.items() if k != "type"}
    return PROCESSOR_REGISTRY[kind](params)


def build_pipeline(specs: List[Dict[str, Any]]) -> IProcessor:
    """
    Builds and chains processors left to right.
    An empty list yields a plain DefaultProcessor.
    """
    processors = [build_processor(spec) for spec in specs]
    if not processors:
        return DefaultProcessor()
    if len(processors) == 1:
        return processors[0]

    pipeline = chain(*processors)
    logger.debug(f"Built pipeline: {pipeline.identifier}")
    return pipeline
