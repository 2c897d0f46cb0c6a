from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional


class ApiFunctionNotFoundError(KeyError):
    """Raised when calling a name that was never registered."""


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    signature: inspect.Signature

    @property
    def is_coroutine(self) -> bool:
        return inspect.iscoroutinefunction(self.func)

    @property
    def parameters(self) -> Dict[str, str]:
        return {param.name: str(param.annotation) for param in self.signature.parameters.values()}

    @property
    def required(self) -> List[str]:
        return [
            param.name
            for param in self.signature.parameters.values()
            if param.default is inspect.Parameter.empty
        ]

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "parameters": self.parameters,
            "required": self.required,
            "async": self.is_coroutine,
        }


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"API function '{name}' is already registered.")
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            signature=inspect.signature(func),
        )
        return func

    return decorator


def get_api_functions() -> List[ApiFunction]:
    return list(REGISTRY.values())


def get_api_function(name: str) -> ApiFunction:
    if name not in REGISTRY:
        raise ApiFunctionNotFoundError(f"API function '{name}' is not registered.")
    return REGISTRY[name]


def call_api(name: str, **kwargs: Any) -> Any:
    return get_api_function(name).func(**kwargs)


async def acall_api(name: str, **kwargs: Any) -> Any:
    result = call_api(name, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
