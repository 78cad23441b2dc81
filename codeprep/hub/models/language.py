"""Per-language display metadata and starter snippets."""

from __future__ import annotations

from pydantic import BaseModel

from codeprep.hub.models.enums import Language


class LanguageInfo(BaseModel):
    name: str
    extension: str
    editor_mode: str


LANGUAGES: dict[Language, LanguageInfo] = {
    Language.JAVASCRIPT: LanguageInfo(name="JavaScript", extension="js", editor_mode="javascript"),
    Language.PYTHON: LanguageInfo(name="Python", extension="py", editor_mode="python"),
    Language.JAVA: LanguageInfo(name="Java", extension="java", editor_mode="java"),
    Language.CPP: LanguageInfo(name="C++", extension="cpp", editor_mode="cpp"),
}

DEFAULT_CODE: dict[Language, str] = {
    Language.JAVASCRIPT: '// JavaScript\nconsole.log("Hello, World!");',
    Language.PYTHON: '# Python\nprint("Hello, World!")',
    Language.JAVA: (
        "// Java\n"
        "public class Main {\n"
        "    public static void main(String[] args) {\n"
        '        System.out.println("Hello, World!");\n'
        "    }\n"
        "}"
    ),
    Language.CPP: (
        "// C++\n"
        "#include <iostream>\n"
        "using namespace std;\n"
        "\n"
        "int main() {\n"
        '    cout << "Hello, World!" << endl;\n'
        "    return 0;\n"
        "}"
    ),
}


def display_name(language: Language) -> str:
    return LANGUAGES[language].name


def default_code(language: Language) -> str:
    return DEFAULT_CODE[language]
