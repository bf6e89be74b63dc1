import logging
from functools import wraps
from typing import Optional, Dict, Any, List, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ..api_client import APIClient, api_client
from ..exceptions import ConsoleError, ServiceError
from ..schemas import Pagination

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def service_call(fallback: str):
    """
    Wrap a service method so any failure surfaces as a ServiceError
    carrying the original message, or `fallback` when that is empty.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ServiceError:
                raise
            except (ConsoleError, requests.exceptions.RequestException, ValidationError) as e:
                message = getattr(e, "message", None) or str(e) or fallback
                logger.error(f"{func.__qualname__} failed: {message}")
                raise ServiceError(message, cause=e) from e
            except KeyError as e:
                # response envelope missing its payload key
                message = f"{fallback}: missing {e} in response"
                logger.error(f"{func.__qualname__} failed: {message}")
                raise ServiceError(message, cause=e) from e
            except (ValueError, TypeError, ZeroDivisionError) as e:
                # bad caller input or an unexpected payload shape
                message = f"{fallback}: {e}" if str(e) else fallback
                logger.error(f"{func.__qualname__} failed: {message}")
                raise ServiceError(message, cause=e) from e
        return wrapper
    return decorator


def clean_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop empty query parameters"""
    return {k: v for k, v in params.items() if v not in (None, "", False)}


def parse_list(model: Type[ModelT], items: Optional[List[Dict[str, Any]]]) -> List[ModelT]:
    return [model.model_validate(item) for item in (items or [])]


def parse_pagination(response: Dict[str, Any]) -> Pagination:
    return Pagination.model_validate(response.get("pagination") or {})


class BaseService:
    """Holds the shared HTTP client; one subclass per backend resource"""

    def __init__(self, client: Optional[APIClient] = None):
        self.client = client or api_client
