"""Typed client for the Bitcoin Core JSON-RPC API."""

from .auth import Auth, CookieFile, NoAuth, UserPass
from .client import Client, RpcApi
from .definitions import *
from .error import DecodeError, Error, InvalidCookieFile, RpcError, TransportError
from .jsonrpc import JsonRpcClient
from .queryable import Queryable
