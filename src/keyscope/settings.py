import dataclasses
import json
import pathlib
import typing

import cattrs

from .commontypes import SettingsError
from .display import DEFAULT_COLUMN_FORMATS, Column, DisplayFormat
from .keytables import KeyTables, load_scan_code_table, load_vkey_table

settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(Column, lambda c: c.name)
settings_converter.register_structure_hook(Column, lambda v, _: Column[v])
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v))


def default_column_formats():
    return dict(DEFAULT_COLUMN_FORMATS)


@dataclasses.dataclass(kw_only=True)
class Settings:
    # When off, every raw record is shown exactly as delivered.
    adjust_input: bool = True
    column_formats: dict[Column, DisplayFormat] = dataclasses.field(default_factory=default_column_formats)
    scan_code_table: typing.Optional[pathlib.Path] = None
    vkey_table: typing.Optional[pathlib.Path] = None

    def format_for(self, column: Column) -> DisplayFormat:
        return self.column_formats.get(column, DEFAULT_COLUMN_FORMATS[column])

    def tables(self) -> KeyTables:
        default = KeyTables.load_default()
        if self.scan_code_table is None and self.vkey_table is None:
            return default
        scan_codes = default.scan_codes
        virtual_keys = default.virtual_keys
        if self.scan_code_table is not None:
            scan_codes = load_scan_code_table(self.scan_code_table.read_text(encoding="utf-8"))
        if self.vkey_table is not None:
            virtual_keys = load_vkey_table(self.vkey_table.read_text(encoding="utf-8"))
        return KeyTables(scan_codes, virtual_keys)

    def dump(self):
        return settings_converter.unstructure(self)

    @classmethod
    def load(cls, src: pathlib.Path):
        try:
            with src.open() as f:
                raw = json.load(f)
            return settings_converter.structure(raw, cls)
        except (OSError, ValueError, cattrs.BaseValidationError) as exc:
            raise SettingsError(f"Could not load settings from {src}") from exc

    @classmethod
    def for_test(cls):
        return settings_converter.structure(
            {
                "adjust_input": True,
                "column_formats": {
                    "VIRTUAL_KEY": "hex",
                    "MAKE_CODE": "hex",
                    "FLAGS": "bin",
                    "KEY_CODE_NAME": "glfw",
                    "KEY_CODE": "dec",
                },
            },
            cls,
        )
