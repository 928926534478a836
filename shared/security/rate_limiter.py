from slowapi import Limiter
from slowapi.util import get_remote_address

# Login attempts are throttled per client address. Every client shares the same
# application key, so the key cannot tell callers apart.
limiter = Limiter(key_func=get_remote_address)
