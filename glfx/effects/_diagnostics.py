"""
Mapping compiler diagnostics back to effect files.

The composed code contains ``#line <line> <file_index>`` markers, so GLSL
compilers report errors as a (file_index, line) pair. The formats differ
per driver::

    0(12) : error C0000: syntax error          (NVIDIA)
    ERROR: 0:12: 'foo' : undeclared identifier  (AMD, Intel, ANGLE)
    0:12(5): error: 'foo' undeclared            (Mesa)

The file index refers to the list of source files of the composition.
"""

import re


re_nvidia = re.compile(r"^(?P<pre>\s*)(?P<file>\d+)\((?P<line>\d+)\)")
re_colon = re.compile(
    r"^(?P<pre>\s*(?:(?:ERROR|WARNING|error|warning):\s*)?)(?P<file>\d+):(?P<line>\d+)"
)


def map_location(source_files, file_index, line):
    """Get (location, line) for a file index and line number reported by a compiler."""
    if not 0 <= file_index < len(source_files):
        raise IndexError(
            f"File index {file_index} out of range for {len(source_files)} source files."
        )
    return source_files[file_index].location, line


def translate_log(log, source_files):
    """Replace file indices in a compiler info log with the locations of the source files.

    Lines that do not start with a recognized (file_index, line) reference,
    or that reference an unknown file index, are left as they are.
    """
    result = []
    for logline in log.splitlines(True):
        for regex, fmt in ((re_nvidia, "{}({})"), (re_colon, "{}:{}")):
            match = regex.match(logline)
            if match is None:
                continue
            file_index = int(match.group("file"))
            if file_index < len(source_files):
                location = source_files[file_index].location
                ref = fmt.format(location, match.group("line"))
                logline = match.group("pre") + ref + logline[match.end() :]
            break
        result.append(logline)
    return "".join(result)
