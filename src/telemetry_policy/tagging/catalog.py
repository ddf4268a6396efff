"""
Built-in table of well-known stat tags and the regexes that extract them

Entries are listed in the order they are applied when an extractor includes
the defaults, roughly from most specific to least specific. Each regex is
written so that it does not depend on the others having run first.

Notation used in the comments above each entry:
- the text the regex captures is enclosed in ()
- other default tags that may still be present are enclosed in []
- variable segments of the name are enclosed in <>
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


class TagNames:
    """Names of the well-known tags"""

    CLUSTER_NAME = "envoy.cluster_name"
    LISTENER_ADDRESS = "envoy.listener_address"
    RESPONSE_CODE = "envoy.response_code"
    RESPONSE_CODE_CLASS = "envoy.response_code_class"
    HTTP_USER_AGENT = "envoy.http_user_agent"
    HTTP_CONN_MANAGER_PREFIX = "envoy.http_conn_manager_prefix"
    SSL_CIPHER = "envoy.ssl_cipher"
    SSL_CIPHER_SUITE = "cipher_suite"
    TCP_PREFIX = "envoy.tcp_prefix"
    CLIENTSSL_PREFIX = "envoy.clientssl_prefix"
    RATELIMIT_PREFIX = "envoy.ratelimit_prefix"
    VIRTUAL_HOST = "envoy.virtual_host"
    VIRTUAL_CLUSTER = "envoy.virtual_cluster"
    FAULT_DOWNSTREAM_CLUSTER = "envoy.fault_downstream_cluster"
    GRPC_BRIDGE_SERVICE = "envoy.grpc_bridge_service"
    GRPC_BRIDGE_METHOD = "envoy.grpc_bridge_method"
    MONGO_PREFIX = "envoy.mongo_prefix"
    MONGO_CMD = "envoy.mongo_cmd"
    MONGO_COLLECTION = "envoy.mongo_collection"
    MONGO_CALLSITE = "envoy.mongo_callsite"
    DYNAMO_PARTITION_ID = "envoy.dynamo_partition_id"
    DYNAMO_OPERATION = "envoy.dynamo_operation"
    DYNAMO_TABLE = "envoy.dynamo_table"


@dataclass(frozen=True)
class DefaultTag:
    """One catalog entry

    ``substr`` is a literal that must occur in a stat name for ``pattern`` to
    have any chance of matching. Empty means no hint.
    """

    name: str
    pattern: str
    substr: str = ""


class DefaultTagCatalog:
    """Immutable, ordered lookup of default tag regexes by tag name"""

    def __init__(self, entries: Iterable[DefaultTag]):
        self._entries: Tuple[DefaultTag, ...] = tuple(entries)
        self._by_name: Dict[str, DefaultTag] = {}
        for entry in self._entries:
            if entry.name in self._by_name:
                raise ValueError(f"Default tag '{entry.name}' listed twice in catalog")
            self._by_name[entry.name] = entry

    def __iter__(self) -> Iterator[DefaultTag]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Optional[DefaultTag]:
        return self._by_name.get(name)

    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    def subset(self, names: Iterable[str]) -> "DefaultTagCatalog":
        """Return a reduced catalog holding only ``names``, in catalog order"""
        wanted = set(names)
        missing = wanted - self._by_name.keys()
        if missing:
            raise KeyError(f"Not in catalog: {sorted(missing)}")
        return DefaultTagCatalog(e for e in self._entries if e.name in wanted)

    def __repr__(self) -> str:
        return f"DefaultTagCatalog({len(self)} entries)"


DEFAULT_TAG_CATALOG = DefaultTagCatalog(
    [
        # *_rq(_<response_code>)
        DefaultTag(TagNames.RESPONSE_CODE, r"_rq(_(\d{3}))$", "_rq_"),
        # *_rq(_<response_code_class>xx)
        DefaultTag(TagNames.RESPONSE_CODE_CLASS, r"_rq(_(\d)xx)$", "_rq_"),
        # http.[<stat_prefix>.]dynamodb.table.[<table_name>.]capacity.[<operation_name>.](__partition_id=<last_seven_characters_from_partition_id>)
        DefaultTag(
            TagNames.DYNAMO_PARTITION_ID,
            r"^http(?=\.).*?\.dynamodb\.table(?=\.).*?\.capacity(?=\.).*?(\.__partition_id=(\w{7}))$",
            ".dynamodb.table.",
        ),
        # http.[<stat_prefix>.]dynamodb.operation.(<operation_name>.)<base_stat> or
        # http.[<stat_prefix>.]dynamodb.table.[<table_name>.]capacity.(<operation_name>.)[<partition_id>]
        DefaultTag(
            TagNames.DYNAMO_OPERATION,
            r"^http(?=\.).*?\.dynamodb.(?:operation|table(?=\.).*?\.capacity)(\.(.*?))(?:\.|$)",
            ".dynamodb.",
        ),
        # mongo.[<stat_prefix>.]collection.[<collection>.]callsite.(<callsite>.)query.<base_stat>
        DefaultTag(
            TagNames.MONGO_CALLSITE,
            r"^mongo(?=\.).*?\.collection(?=\.).*?\.callsite\.((.*?)\.).*?query.\w+?$",
            ".collection.",
        ),
        # http.[<stat_prefix>.]dynamodb.table.(<table_name>.) or
        # http.[<stat_prefix>.]dynamodb.error.(<table_name>.)*
        DefaultTag(
            TagNames.DYNAMO_TABLE,
            r"^http(?=\.).*?\.dynamodb.(?:table|error)\.((.*?)\.)",
            ".dynamodb.",
        ),
        # mongo.[<stat_prefix>.]collection.(<collection>.)query.<base_stat>
        DefaultTag(
            TagNames.MONGO_COLLECTION,
            r"^mongo(?=\.).*?\.collection\.((.*?)\.).*?query.\w+?$",
            ".collection.",
        ),
        # mongo.[<stat_prefix>.]cmd.(<cmd>.)<base_stat>
        DefaultTag(TagNames.MONGO_CMD, r"^mongo(?=\.).*?\.cmd\.((.*?)\.)\w+?$", ".cmd."),
        # cluster.[<route_target_cluster>.]grpc.[<grpc_service>.](<grpc_method>.)<base_stat>
        DefaultTag(
            TagNames.GRPC_BRIDGE_METHOD,
            r"^cluster(?=\.).*?\.grpc(?=\.).*\.((.*?)\.)\w+?$",
            ".grpc.",
        ),
        # http.[<stat_prefix>.]user_agent.(<user_agent>.)<base_stat>
        DefaultTag(
            TagNames.HTTP_USER_AGENT,
            r"^http(?=\.).*?\.user_agent\.((.*?)\.)\w+?$",
            ".user_agent.",
        ),
        # vhost.[<virtual host name>.]vcluster.(<virtual_cluster_name>.)<base_stat>
        DefaultTag(
            TagNames.VIRTUAL_CLUSTER,
            r"^vhost(?=\.).*?\.vcluster\.((.*?)\.)\w+?$",
            ".vcluster.",
        ),
        # http.[<stat_prefix>.]fault.(<downstream_cluster>.)<base_stat>
        DefaultTag(
            TagNames.FAULT_DOWNSTREAM_CLUSTER,
            r"^http(?=\.).*?\.fault\.((.*?)\.)\w+?$",
            ".fault.",
        ),
        # listener.[<address>.]ssl.cipher.(<cipher>)
        DefaultTag(TagNames.SSL_CIPHER, r"^listener(?=\.).*?\.ssl\.cipher(\.(.*?))$"),
        # cluster.[<cluster_name>.]ssl.ciphers.(<cipher>)
        DefaultTag(
            TagNames.SSL_CIPHER_SUITE,
            r"^cluster(?=\.).*?\.ssl\.ciphers(\.(.*?))$",
            ".ssl.ciphers.",
        ),
        # cluster.[<route_target_cluster>.]grpc.(<grpc_service>.)*
        DefaultTag(
            TagNames.GRPC_BRIDGE_SERVICE,
            r"^cluster(?=\.).*?\.grpc\.((.*?)\.)",
            ".grpc.",
        ),
        # tcp.(<stat_prefix>.)<base_stat>
        DefaultTag(TagNames.TCP_PREFIX, r"^tcp\.((.*?)\.)\w+?$"),
        # auth.clientssl.(<stat_prefix>.)<base_stat>
        DefaultTag(TagNames.CLIENTSSL_PREFIX, r"^auth\.clientssl\.((.*?)\.)\w+?$"),
        # ratelimit.(<stat_prefix>.)<base_stat>
        DefaultTag(TagNames.RATELIMIT_PREFIX, r"^ratelimit\.((.*?)\.)\w+?$"),
        # cluster.(<cluster_name>.)*
        DefaultTag(TagNames.CLUSTER_NAME, r"^cluster\.((.*?)\.)"),
        # http.(<stat_prefix>.)*
        DefaultTag(TagNames.HTTP_CONN_MANAGER_PREFIX, r"^http\.((.*?)\.)"),
        # listener.(<address>.)*
        DefaultTag(
            TagNames.LISTENER_ADDRESS,
            r"^listener\.(((?:[_.\d]*|[_\[\]aAbBcCdDeEfF\d]*))\.)",
        ),
        # vhost.(<virtual host name>.)*
        DefaultTag(TagNames.VIRTUAL_HOST, r"^vhost\.((.*?)\.)"),
        # mongo.(<stat_prefix>.)*
        DefaultTag(TagNames.MONGO_PREFIX, r"^mongo\.((.*?)\.)"),
    ]
)
