"""Transport subsystem -- how scaffolds reach the remote API."""

from ur_scaffold.transport.base import HttpResponse, HttpTransport, create_transport

__all__ = ["HttpResponse", "HttpTransport", "create_transport"]
