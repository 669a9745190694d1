"""
Resolving logical source names to effect files, and reading them.

A logical source name like "lighting/Phong" is what shader code uses to refer
to an effect. The registry maps it to a SourceFile, either via an explicit
SourceDeclaration supplied by the caller, or by synthesizing a default path
from the configured base directory and extension.
"""

import os
import codecs
import posixpath
import importlib.resources

from ..utils import logger, assert_type, get_shader_dir, get_shader_extension
from ._errors import SourceNotFound, SourceUnavailable


class SourceFile:
    """Object to represent an effect source, on the file system or embedded in a package.

    Parameters:
        logical_name (str): The name that shader code uses for this source.
        location (str): The file path, or the resource path within ``package``.
        package (str | None): The package that holds the source as a resource.
            If given, the source is embedded.
    """

    __slots__ = ["_logical_name", "_location", "_package"]

    def __init__(self, logical_name, location, package=None):
        assert_type("logical_name", logical_name, str)
        assert_type("location", location, str)
        assert_type("package", package, None, str)
        self._logical_name = logical_name
        self._location = location
        self._package = package

    def __repr__(self):
        return f"<SourceFile {self._logical_name!r} at {self.identity!r}>"

    def __str__(self):
        return self._location

    def __eq__(self, other):
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self._logical_name.lower() == other._logical_name.lower()

    def __hash__(self):
        return hash(self._logical_name.lower())

    @property
    def logical_name(self):
        """The name used to request this source, e.g. "lighting/Phong"."""
        return self._logical_name

    @property
    def location(self):
        """The file path, or the resource path if the source is embedded."""
        return self._location

    @property
    def package(self):
        """The package containing the resource, or None for file sources."""
        return self._package

    @property
    def embedded(self):
        """Whether this source is a resource embedded in a Python package."""
        return self._package is not None

    @property
    def identity(self):
        """The canonical identity of this source, used as cache key."""
        if self._package is not None:
            return f"{self._package}:{self._location.replace(os.sep, '/')}"
        return os.path.normcase(os.path.abspath(self._location))


class SourceDeclaration:
    """An explicit declaration of where a logical source lives.

    Parameters:
        logical_name (str): The logical name, matched case-insensitively.
        location (str | None): The file path or resource path. If None, the
            default location is synthesized from the registry's base dir.
        embedded (bool): Whether the source is a resource in ``package``.
        package (str | None): The package holding the resource (required if embedded).
    """

    __slots__ = ["logical_name", "location", "embedded", "package"]

    def __init__(self, logical_name, location=None, *, embedded=False, package=None):
        assert_type("logical_name", logical_name, str)
        assert_type("location", location, None, str)
        if embedded:
            if not package:
                raise ValueError(
                    f"Embedded source '{logical_name}' needs a package to load from."
                )
            if not location:
                location = logical_name + "." + get_shader_extension()
        self.logical_name = logical_name
        self.location = location
        self.embedded = bool(embedded)
        self.package = package if embedded else None

    def __repr__(self):
        kind = "embedded" if self.embedded else "file"
        return f"<SourceDeclaration {self.logical_name!r} ({kind}) {self.location!r}>"

    def matches(self, logical_name):
        """Get whether this declaration is for the given logical name.

        Both the full name and its base name are considered.
        """
        name = self.logical_name.lower()
        requested = logical_name.lower()
        return name == requested or name == posixpath.basename(requested)


# %% Readers


class SourceReader:
    """Base class for objects that provide the text of sources.

    Subclasses implement ``read()`` to return the str or bytes content of a
    source, or None if it does not exist.
    """

    def exists(self, source_file):
        """Get whether the given (non-embedded) source exists. Default True."""
        return True

    def read(self, source_file):
        raise NotImplementedError()


class FileSystemReader(SourceReader):
    """Reads sources from the file system, and embedded sources from package resources."""

    def exists(self, source_file):
        if source_file.embedded:
            ref = self._get_resource(source_file)
            return ref is not None and ref.is_file()
        return os.path.isfile(source_file.location)

    def read(self, source_file):
        if source_file.embedded:
            ref = self._get_resource(source_file)
            if ref is None or not ref.is_file():
                return None
            return ref.read_bytes()
        try:
            with open(source_file.location, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def _get_resource(self, source_file):
        try:
            ref = importlib.resources.files(source_file.package)
        except ModuleNotFoundError:
            return None
        for part in source_file.location.replace("\\", "/").split("/"):
            if part:
                ref = ref / part
        return ref


class DictReader(SourceReader):
    """Reads sources from a dict that maps locations to str or bytes."""

    def __init__(self, mapping):
        self.mapping = mapping

    def _key(self, source_file):
        location = source_file.location
        if location in self.mapping:
            return location
        # Allow writing keys with forward slashes on any platform
        location = location.replace(os.sep, "/")
        if location in self.mapping:
            return location
        return None

    def exists(self, source_file):
        return self._key(source_file) is not None

    def read(self, source_file):
        key = self._key(source_file)
        return None if key is None else self.mapping[key]


class FunctionReader(SourceReader):
    """Reads sources using a function that accepts a SourceFile.

    The existence of a source cannot be checked without reading it,
    so a missing source is only detected when it's read.
    """

    def __init__(self, func):
        self.func = func

    def read(self, source_file):
        return self.func(source_file)


def as_reader(reader):
    """Turn a SourceReader, dict, or callable into a SourceReader."""
    if reader is None:
        return FileSystemReader()
    elif isinstance(reader, SourceReader):
        return reader
    elif isinstance(reader, dict):
        return DictReader(reader)
    elif callable(reader):
        return FunctionReader(reader)
    else:
        raise TypeError(
            f"The source reader must be a SourceReader, function, or dict. Not {reader!r}"
        )


def decode_source(data):
    """Decode source bytes as utf-8, dropping a BOM."""
    if isinstance(data, str):
        return data
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8) :]
    return data.decode("utf-8")


# %% Registry


class SourceRegistry:
    """Map logical source names to SourceFile objects and read their text.

    Parameters:
        declarations (iterable): SourceDeclaration objects. Earlier
            declarations take precedence over later ones.
        base_dir (str | None): The directory for default locations. Default
            from ``glfx.utils.get_shader_dir()``.
        extension (str | None): The extension for default locations. Default
            from ``glfx.utils.get_shader_extension()``.
        reader (SourceReader | dict | callable | None): Provides the
            content of sources. Default reads from the file system and
            package resources.
    """

    def __init__(self, declarations=(), *, base_dir=None, extension=None, reader=None):
        self._declarations = []
        for declaration in declarations:
            self.declare(declaration)
        self._base_dir = get_shader_dir() if base_dir is None else str(base_dir)
        extension = get_shader_extension() if extension is None else extension
        self._extension = extension.lstrip(".")
        self._reader = as_reader(reader)

    def __repr__(self):
        n = len(self._declarations)
        return f"<SourceRegistry with {n} declarations in {self._base_dir!r}>"

    @property
    def declarations(self):
        """A tuple with the declared sources."""
        return tuple(self._declarations)

    @property
    def base_dir(self):
        """The base directory for synthesized locations."""
        return self._base_dir

    @property
    def extension(self):
        """The extension appended to synthesized locations."""
        return self._extension

    @property
    def reader(self):
        """The SourceReader that provides the content of sources."""
        return self._reader

    def declare(self, declaration):
        """Add a SourceDeclaration. It has lower priority than existing declarations."""
        assert_type("declaration", declaration, SourceDeclaration)
        self._declarations.append(declaration)

    def find_declaration(self, logical_name):
        """Get the first declaration matching the given logical name, or None."""
        for declaration in self._declarations:
            if declaration.matches(logical_name):
                return declaration
        return None

    def default_location(self, logical_name):
        """Get the synthesized file path for the given logical name."""
        dirname, basename = posixpath.split(logical_name)
        path = os.path.join(self._base_dir, dirname, basename)
        if self._extension:
            path += "." + self._extension
        return os.path.normpath(path)

    def resolve(self, logical_name):
        """Get the SourceFile for the given logical name.

        Raises SourceNotFound if the name is not declared and no file
        exists at the default location.
        """
        assert_type("logical_name", logical_name, str)
        logical_name = logical_name.replace("\\", "/")
        declaration = self.find_declaration(logical_name)

        if declaration is not None and declaration.embedded:
            # The existence of embedded sources is checked when reading
            return SourceFile(
                logical_name, declaration.location, package=declaration.package
            )

        if declaration is not None and declaration.location:
            source_file = SourceFile(logical_name, declaration.location)
            if self._reader.exists(source_file):
                return source_file
            # Try again relative to the base directory
            location = os.path.join(self._base_dir, declaration.location)
            source_file = SourceFile(logical_name, os.path.normpath(location))
            if self._reader.exists(source_file):
                return source_file
            raise SourceNotFound(
                logical_name, f"declared at '{declaration.location}' or '{location}'"
            )

        location = self.default_location(logical_name)
        source_file = SourceFile(logical_name, location)
        if self._reader.exists(source_file):
            return source_file
        raise SourceNotFound(logical_name, f"no declaration and no file at '{location}'")

    def read(self, source_file):
        """Get the text of the given source.

        Raises SourceNotFound if the reader has no such source, and
        SourceUnavailable if an embedded resource is missing or the
        source cannot be read.
        """
        assert_type("source_file", source_file, SourceFile)
        try:
            data = self._reader.read(source_file)
        except OSError as err:
            logger.error(f"Error while reading effect source {source_file.identity!r}")
            raise SourceUnavailable(source_file, str(err)) from err
        if data is None:
            if source_file.embedded:
                reason = f"resource not found in package '{source_file.package}'"
                raise SourceUnavailable(source_file, reason)
            raise SourceNotFound(
                source_file.logical_name, f"no source at '{source_file.location}'"
            )
        try:
            return decode_source(data)
        except UnicodeDecodeError as err:
            raise SourceUnavailable(source_file, "not valid utf-8") from err
