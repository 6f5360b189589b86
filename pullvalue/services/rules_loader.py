"""
Eligibility rules loading.

Runs once at startup. Every source is optional:
- Exclusivity tags: shared URL, else the built-in fallback lists
- Set configs: local file, else shared URL, else no overrides
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from pullvalue.config import settings
from pullvalue.models.eligibility import EligibilityRules, ExclusivityTags, SetEligibility
from pullvalue.parsers.eligibility_config import parse_exclusivity_tags, parse_set_configs

logger = logging.getLogger(__name__)


async def _fetch_json(client: httpx.AsyncClient, url: str) -> Any:
    response = await client.get(url)
    response.raise_for_status()
    return response.json()


async def load_exclusivity_tags(client: httpx.AsyncClient, url: str) -> ExclusivityTags:
    """Shared exclusivity tags, or the fallback lists if unavailable."""
    try:
        tags = parse_exclusivity_tags(await _fetch_json(client, url))
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Failed to fetch collector exclusives, using fallback values: %s", e)
        return ExclusivityTags()

    logger.info("Loaded collector exclusives from shared config")
    return tags


async def load_set_configs(
    client: httpx.AsyncClient,
    path: Path,
    url: str,
) -> dict[str, SetEligibility]:
    """Per-set overrides from the local file, then the shared URL."""
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                configs = parse_set_configs(json.load(f))
            logger.info("Loaded set configs from %s for %d sets", path, len(configs))
            return configs
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, trying remote: %s", path, e)

    try:
        configs = parse_set_configs(await _fetch_json(client, url))
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Could not load set configs, using default rules: %s", e)
        return {}

    logger.info("Loaded set configs from remote for %d sets", len(configs))
    return configs


async def load_eligibility_rules(client: httpx.AsyncClient | None = None) -> EligibilityRules:
    """Build the EligibilityRules used for the whole process lifetime."""
    if client is None:
        async with httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.http_timeout,
            follow_redirects=True,
        ) as owned:
            return await load_eligibility_rules(owned)

    tags = await load_exclusivity_tags(client, settings.collector_exclusives_url)
    sets = await load_set_configs(client, settings.set_configs_path, settings.set_configs_url)
    return EligibilityRules(sets=sets, tags=tags)
