"""Shared fixtures for confbind tests."""

import pytest

from confbind.bootstrap import create_registry
from confbind.infrastructure.loaders import PropertiesConfigLoader, StringConfigSource
from confbind.providers import CachedConfigProvider, DefaultConfigProvider

TEST_PROPERTIES = """\
# Scalars
integerProperty=1
longProperty=2
floatProperty=2.1
doubleProperty=1.1
booleanProperty=true
bigDecimalProperty=1.1
file=myfile.txt
path=mypath.txt
url=https://www.amazon.com
uri=https://www.amazon.com
dateProperty=01-01-2017
localDateTimeProperty=01-01-2017 18:01:31
isoLocalDateProperty=2017-01-01

! Collections
list=1,2,3,4,5
set=1,2,3,4,5,5
emptyList=

# Bound sections
a=b
c=d
normal.integerWithDefault=123456
nested.normal.a=reala
nested.normal.c=realc
nested.supernested.normal=2
"""


@pytest.fixture
def properties_loader():
    return PropertiesConfigLoader(StringConfigSource(TEST_PROPERTIES))


@pytest.fixture(params=["default", "cached"])
def any_provider(request, properties_loader):
    """Every behaviour shared by both providers runs against each of them."""
    inner = DefaultConfigProvider(properties_loader, registry=create_registry())
    if request.param == "cached":
        return CachedConfigProvider(inner)
    return inner
