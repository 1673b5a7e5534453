"""List stored temporary links (maintenance tooling).

This CLI follows this procedure to report links:
- Step 1: Resolve the Redis link store (from --redis-host or the configuration of --component)
- Step 2: Snapshot every stored link
- Step 3: Evaluate expiration at the current time (read-only, nothing is persisted)
- Step 4: Print one JSON document per link, oldest first

CLI usage:
    $ templinks-list --redis-host localhost --prefix templinks:dev
    $ templinks-list --component get_link --state expired

Only the Redis backend can be listed. The in-memory store belongs to the
process serving requests, so a configuration selecting it is rejected.

Raises:
    DataStoreError: If the Redis store can't be reached.
"""

import json
import argparse

from templinks.dao import LinkBaseDAO, LinkRedisDAO, build_link_dao
from templinks.exceptions import BadConfigurationError, ConfigurationError
from templinks.lifecycle import evaluate_expiration
from templinks.utils import app_prefix, load_config, utc_now
from templinks.utils.config import DEFAULT_BACKEND


def resolve_dao(args: argparse.Namespace) -> LinkBaseDAO:
    """Build the store to list from

    Raises:
        BadConfigurationError:
            If the configuration selects the in-memory backend. That store
            lives inside each handler process, so a separate CLI process would
            only ever see an empty one.
    """
    if args.redis_host:
        return LinkRedisDAO(redis_host=args.redis_host, redis_port=args.redis_port, redis_db=args.redis_db, prefix=args.prefix)

    app_config = load_config(args.component)
    if DEFAULT_BACKEND in app_config:
        raise BadConfigurationError(
            f"Component '{args.component}' uses the in-memory store, which can't be listed from another process. Pass --redis-host or configure the redis backend."
        )
    return build_link_dao(app_config, prefix=args.prefix or app_prefix())


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='templinks-list',
        description='Print stored temporary links as JSON lines',
    )
    parser.add_argument('--component', default='get_link', help='Configuration section to read the store from (default: get_link)')
    parser.add_argument('--redis-host', default=None, help='Connect to this Redis host instead of using the configuration')
    parser.add_argument('--redis-port', type=int, default=6379)
    parser.add_argument('--redis-db', type=int, default=0)
    parser.add_argument('--prefix', default=None, help='Key namespace, e.g. templinks:dev')
    parser.add_argument(
        '--state',
        choices=('all', 'active', 'expired'),
        default='all',
        help='Only print links in this state (default: all)',
    )
    args = parser.parse_args(argv)

    try:
        dao = resolve_dao(args)
    except ConfigurationError as e:
        parser.error(str(e))
    now = utc_now()

    for link in sorted(dao.list_all(), key=lambda link: link.id):
        is_expired, _ = evaluate_expiration(link, now)
        if args.state == 'active' and is_expired or args.state == 'expired' and not is_expired:
            continue
        print(json.dumps({**link.to_dict(), 'isExpired': is_expired}))


if __name__ == '__main__':
    main()
