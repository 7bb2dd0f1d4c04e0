from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

# Wire format is camelCase (mobile client); Python attributes stay snake_case.
camel_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
)
