"""Override dependencies for a single call with ``using``.

This module covers:

1. Mapping overrides, including falsy values.
2. Function sources resolved against the context.
3. Another context as the override source.
"""

from __future__ import annotations

from mortar import Context


def main() -> None:
    context = Context()
    context.wire(True).as_.value("debug")
    context.wire("eu-west-1").as_.value("region")

    def settings(debug: bool, region: str) -> tuple[bool, str]:
        return debug, region

    print(context.using({"debug": False}).resolve(settings))  # => (False, 'eu-west-1')
    print(context.resolve(settings))  # => (True, 'eu-west-1')

    from_region = context.using(lambda region: {"debug": region.startswith("eu")})
    print(from_region.resolve(settings))  # => (True, 'eu-west-1')

    staging = Context()
    staging.wire("us-east-1").as_.value("region")
    print(context.using(staging).resolve(settings))  # => (True, 'us-east-1')


if __name__ == "__main__":
    main()
