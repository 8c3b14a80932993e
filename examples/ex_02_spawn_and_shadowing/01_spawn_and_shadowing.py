"""Child contexts fall back to their ancestors and may shadow them.

This module covers:

1. Retrieving an ancestor's entry from a grandchild.
2. Shadowing an ancestor's entry in a child without affecting the ancestor.
3. ``has`` only reporting the context's own entries.
"""

from __future__ import annotations

from mortar import Context


def main() -> None:
    root = Context()
    root.wire("production").as_.value("environment")

    request = root.spawn().spawn()
    print(f"inherited={request.retrieve('environment')}")  # => inherited=production
    print(f"has_locally={request.has('environment')}")  # => has_locally=False

    request.wire("test").as_.value("environment")
    print(f"child={request.retrieve('environment')}")  # => child=test
    print(f"root={root.retrieve('environment')}")  # => root=production

    request.release("environment")
    print(f"after_release={request.retrieve('environment')}")  # => after_release=production


if __name__ == "__main__":
    main()
