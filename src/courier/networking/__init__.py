"""HTTP request pipeline with pluggable interceptors."""

from .auth_interceptors import (
    AuthInterceptor,
    InMemoryTokenStore,
    TokenPair,
    TokenRefreshInterceptor,
    TokenStore,
)
from .client import HttpClient
from .config import CacheConfig, ClientConfig
from .cookie_interceptor import CookieInterceptor
from .empty import EmptyResponse, EmptyValueFactory, default_empty_values
from .errors import (
    ApiErrorResponse,
    ClientError,
    ConfigurationError,
    ConnectionFailedError,
    EmptyResponseError,
    HttpClientError,
    InvalidPathError,
    RequestEncodeError,
    RequestTimeoutError,
    ResponseDecodeError,
    ServerError,
    StatusError,
    TransportError,
    UnexpectedStatusError,
    UnknownResponseError,
)
from .executor import RawExecutor, RequestExecutor
from .interceptors import Interceptor, InterceptorChain
from .request import HttpMethod, RequestDescriptor, WireRequest
from .response import ResponseEnvelope, TransportResponse
from .types import Err, Ok, Result

__all__ = [
    "ApiErrorResponse",
    "AuthInterceptor",
    "CacheConfig",
    "ClientConfig",
    "ClientError",
    "ConfigurationError",
    "ConnectionFailedError",
    "CookieInterceptor",
    "EmptyResponse",
    "EmptyResponseError",
    "EmptyValueFactory",
    "Err",
    "HttpClient",
    "HttpClientError",
    "HttpMethod",
    "InMemoryTokenStore",
    "Interceptor",
    "InterceptorChain",
    "InvalidPathError",
    "Ok",
    "RawExecutor",
    "RequestDescriptor",
    "RequestEncodeError",
    "RequestExecutor",
    "RequestTimeoutError",
    "ResponseDecodeError",
    "ResponseEnvelope",
    "Result",
    "ServerError",
    "StatusError",
    "TokenPair",
    "TokenRefreshInterceptor",
    "TokenStore",
    "TransportError",
    "TransportResponse",
    "UnexpectedStatusError",
    "UnknownResponseError",
    "WireRequest",
    "default_empty_values",
]
