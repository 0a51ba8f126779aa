"""
Current docker-retag version constant plus version pretty-print method.
"""
from typing import Union

VERSION = (0, 2, 0, 'final', 0)


def get_version(form: str = 'short', version: tuple = VERSION) -> Union[dict, str]:
    """
    Return a version string for this package, based on `version`.

    Takes a single argument, ``form``, which should be one of the following
    strings:

    * ``branch``: just the major + minor, e.g. "0.2", "1.0".
    * ``short`` (default): compact, e.g. "0.2rc1", "0.2.0". For package
      filenames or SCM tag identifiers.
    * ``normal``: human readable, e.g. "0.2", "0.2.1", "0.2 beta 1".
    * ``verbose``: like ``normal`` but fully explicit, e.g. "0.2 final".
    * ``all``: Returns all of the above, as a dict.
    """
    major, minor, micro, type_, type_num = version
    final = (type_ == "final")
    branch = "%s.%s" % (major, minor)

    versions = {'branch': branch}

    short = branch
    if micro or final:
        short += "." + str(micro)
    if not final:
        short += type_
        if type_num:
            short += str(type_num)
    versions['short'] = short

    normal = branch
    if micro:
        normal += "." + str(micro)
    verbose = normal

    if not final and type_num:
        normal += " " + type_ + " " + str(type_num)
        verbose = normal
    elif final:
        verbose += " final"
    else:
        normal += " pre-" + type_
        verbose = normal
    versions['normal'] = normal
    versions['verbose'] = verbose

    if form == 'all':
        return versions
    try:
        return versions[form]
    except KeyError:
        raise TypeError('"%s" is not a valid form specifier.' % form)


__version__ = get_version('short')
