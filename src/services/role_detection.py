"""Root-artist role detection.

The root node defaults to ``[artist]``, but many roots are primarily
producers or writers (e.g. Max Martin).  :class:`RoleDetectionService`
asks the LLM which of the three roles the person holds and caches the
answer per lowercase name.

Failure of any kind (no key, SDK error, unparseable reply, empty list)
yields the default.  Detection never raises.
"""

from __future__ import annotations

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.llm_provider import ILLMProvider
from src.models.network import Role
from src.utils.errors import LLMError
from src.utils.json_extract import extract_json_array
from src.utils.logging import get_logger

logger = get_logger(__name__)

_DEFAULT_ROLES = [Role.ARTIST]
_CACHE_PREFIX = "roles:"

_SYSTEM_PROMPT = (
    "You are a music industry expert. Answer with a JSON array only, no prose."
)

_ROLES_PROMPT = """\
Which of these roles does "{name}" hold in the music industry: artist, producer, songwriter?
Return a JSON array containing only values from ["artist", "producer", "songwriter"],
for example ["artist", "songwriter"]. If unsure, return ["artist"].
"""


class RoleDetectionService:
    """Detects the roles of a root artist, with a TTL cache in front."""

    def __init__(
        self,
        llm: ILLMProvider | None,
        cache: ICacheProvider | None = None,
        ttl: int = 86400,
    ) -> None:
        self._llm = llm
        self._cache = cache
        self._ttl = ttl

    async def detect_roles(self, name: str) -> list[Role]:
        cache_key = _CACHE_PREFIX + name.strip().lower()
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached:
                return [Role(r) for r in cached]

        roles = await self._ask(name)
        if self._cache is not None:
            await self._cache.set(cache_key, [r.value for r in roles], ttl=self._ttl)
        return roles

    async def _ask(self, name: str) -> list[Role]:
        if self._llm is None or not self._llm.is_available():
            return list(_DEFAULT_ROLES)
        try:
            reply = await self._llm.complete(
                system_prompt=_SYSTEM_PROMPT,
                user_prompt=_ROLES_PROMPT.format(name=name),
                temperature=0.1,
                max_tokens=50,
            )
            raw = extract_json_array(reply)
        except (LLMError, ValueError) as exc:
            logger.warning("role_detection_failed", artist=name, error=str(exc))
            return list(_DEFAULT_ROLES)

        roles: list[Role] = []
        for value in raw:
            role = Role.parse(value)
            if role is not None and role not in roles:
                roles.append(role)
        if not roles:
            return list(_DEFAULT_ROLES)
        if Role.ARTIST in roles:
            roles.remove(Role.ARTIST)
            roles.insert(0, Role.ARTIST)
        logger.info("roles_detected", artist=name, roles=[r.value for r in roles])
        return roles
