"""Shell function names derived from level-2 headings."""

from __future__ import annotations


def function_slug(title: str) -> str:
    """Turn heading text into a shell function name.

    Lowercases the title and replaces each space with a hyphen. No other
    characters are touched, so punctuation reaches the script verbatim.

    Examples:
        function_slug("Holla Cheese Burgers")  # "holla-cheese-burgers"
        function_slug("Install  Deps")  # "install--deps"
    """
    return title.lower().replace(" ", "-")


def unique_slug(base_slug: str, used_slugs: set[str], slug_counters: dict[str, int]) -> str:
    """Return `base_slug`, or a numbered variant when it is already taken.

    Numbering follows the GitHub anchor convention: the first occurrence keeps
    the bare slug, later ones get ``-1``, ``-2`` and so on. Cascading
    collisions (``"a"``, ``"a"``, ``"a-1"``) are resolved by checking every
    candidate against `used_slugs`. Both collections are updated in place.

    Args:
        base_slug: Slug produced by `function_slug`.
        used_slugs: Every slug issued so far.
        slug_counters: Next counter for each base slug.

    Returns:
        str: A slug not present in `used_slugs` before the call.

    Examples:
        used, counters = set(), {}
        unique_slug("setup", used, counters)  # "setup"
        unique_slug("setup", used, counters)  # "setup-1"
    """
    count = slug_counters.get(base_slug, 0)
    slug = base_slug if count == 0 else f"{base_slug}-{count}"

    while slug in used_slugs:
        count += 1
        slug = f"{base_slug}-{count}"

    slug_counters[base_slug] = count + 1
    used_slugs.add(slug)
    return slug
