import logging
from typing import Callable, Dict, Mapping, Optional

from gridclaim.models import UNKNOWN_COUNTRY

CountryLookup = Callable[[str], Optional[str]]


def client_ip(headers: Mapping[str, str], remote_addr: Optional[str]) -> Optional[str]:
    """Best guess at the client address behind any proxies."""
    forwarded_for = headers.get('X-Forwarded-For') if headers else None
    ip = forwarded_for.split(',')[0].strip() if forwarded_for else remote_addr
    if not ip:
        return None
    if ip == '::1':
        ip = '127.0.0.1'
    if ip.startswith('::ffff:'):
        ip = ip[len('::ffff:'):]
    return ip


def resolve_country(ip: Optional[str], lookup: Optional[CountryLookup] = None,
                    logger: Optional[logging.Logger] = None) -> Dict[str, str]:
    """Map an address to ``{code, name}``; any failure yields Unknown."""
    if not ip or lookup is None:
        return dict(UNKNOWN_COUNTRY)
    try:
        code = lookup(ip)
    except Exception as exc:
        (logger or logging.getLogger(__name__)).warning(f"[geo-fail] ip={ip} error={exc}")
        return dict(UNKNOWN_COUNTRY)
    if not code:
        return dict(UNKNOWN_COUNTRY)
    return {'code': code, 'name': code}
