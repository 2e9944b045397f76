"""Schema models for a parsed discovery document.

`parser.discovery.build_api` converts a raw document into these models.
They are immutable once built; the only exception is `ApiDescription.method_base`,
which callers may override (typically to point tests at another host).
"""

from urllib.parse import urljoin

from pydantic import BaseModel, ConfigDict, PrivateAttr


class Parameter(BaseModel):
    """A single method parameter, substituted into the path or sent in the query."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str  # path / query
    param_type: str = "string"  # string / integer / number / boolean
    required: bool = False
    repeated: bool = False
    pattern: str | None = None
    enum: list[str] | None = None
    default: str | None = None
    description: str = ""


class MethodBase:
    """Shared, overridable request base of one API and all of its methods."""

    def __init__(self, default: str):
        self.default = default
        self.override: str | None = None

    @property
    def value(self) -> str:
        return self.override if self.override is not None else self.default


class Method(BaseModel):
    """One callable operation: HTTP verb, path template and parameter schema."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    http_method: str
    path: str
    parameters: dict[str, Parameter] = {}
    parameter_order: list[str] = []
    request_ref: str | None = None
    response_ref: str | None = None
    media_upload: dict | None = None
    scopes: list[str] = []
    description: str = ""

    _base: MethodBase | None = PrivateAttr(default=None)

    @property
    def method_base(self) -> str | None:
        return self._base.value if self._base is not None else None

    @property
    def required_parameters(self) -> list[str]:
        return [name for name, p in self.parameters.items() if p.required]

    @property
    def optional_parameters(self) -> list[str]:
        return [name for name, p in self.parameters.items() if not p.required]

    @property
    def path_parameters(self) -> list[str]:
        return [name for name, p in self.parameters.items() if p.location == "path"]

    @property
    def query_parameters(self) -> list[str]:
        return [name for name, p in self.parameters.items() if p.location != "path"]

    @property
    def request_schema(self) -> str | None:
        return self.request_ref

    @property
    def response_schema(self) -> str | None:
        return self.response_ref


class _Navigable:
    """Attribute-style access to child resources and methods.

    `api.training.insert` is sugar for `api.lookup("training.insert")`. Names
    that collide with model attributes (or contain dashes) need `lookup`.
    """

    def child(self, name: str) -> "Resource | Method | None":
        resources = self.__dict__.get("resources") or {}
        if name in resources:
            return resources[name]
        methods = self.__dict__.get("methods") or {}
        return methods.get(name)

    def lookup(self, dotted: str) -> "Resource | Method | None":
        """Walk a dotted path of resource names ending in a resource or method."""
        node = self
        for segment in dotted.split("."):
            if not isinstance(node, _Navigable):
                return None
            node = node.child(segment)
            if node is None:
                return None
        return node

    def __getattr__(self, name: str):
        if not name.startswith("_"):
            found = self.child(name)
            if found is not None:
                return found
        return super().__getattr__(name)


class Resource(_Navigable, BaseModel):
    """A named group of methods and nested resources."""

    model_config = ConfigDict(frozen=True)

    name: str
    resources: dict[str, "Resource"] = {}
    methods: dict[str, Method] = {}


class ApiDescription(_Navigable, BaseModel):
    """One version of one API, with its fully resolved resource tree."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    title: str = ""
    description: str = ""
    root_url: str
    service_path: str = ""
    base_url: str = ""
    parameters: dict[str, Parameter] = {}
    resources: dict[str, Resource] = {}
    methods: dict[str, Method] = {}
    schemas: dict[str, dict] = {}

    _document: dict = PrivateAttr(default_factory=dict)
    _base: MethodBase | None = PrivateAttr(default=None)

    @property
    def id(self) -> str:
        return f"{self.name}:{self.version}"

    @property
    def document(self) -> dict:
        """The raw discovery document this description was built from."""
        return self._document

    @property
    def document_base(self) -> str:
        return self.base_url or urljoin(self.root_url, self.service_path)

    @property
    def method_base(self) -> str:
        if self._base is None:
            return urljoin(self.root_url, self.service_path)
        return self._base.value

    @method_base.setter
    def method_base(self, value: str | None) -> None:
        if self._base is None:
            self._base = MethodBase(urljoin(self.root_url, self.service_path))
        self._base.override = value

    def __setattr__(self, name: str, value) -> None:
        # Frozen models reject property setters; method_base is the one writable attribute
        if name == "method_base":
            type(self).method_base.fset(self, value)
            return
        super().__setattr__(name, value)

    @property
    def discovered_resources(self) -> list[Resource]:
        return list(self.resources.values())

    @property
    def discovered_methods(self) -> list[Method]:
        return list(self.methods.values())

    def resource(self, name: str) -> Resource | None:
        return self.resources.get(name)

    def methods_by_id(self) -> dict[str, Method]:
        """Flatten the resource tree into a map of method id to Method."""
        found = {m.id: m for m in self.methods.values()}
        stack = list(self.resources.values())
        while stack:
            resource = stack.pop()
            found.update({m.id: m for m in resource.methods.values()})
            stack.extend(resource.resources.values())
        return found


class DirectoryItem(BaseModel):
    """One entry of the directory listing of known APIs."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    version: str
    title: str = ""
    description: str = ""
    preferred: bool = False
    discovery_rest_url: str = ""
