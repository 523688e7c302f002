"""
Langages acceptés par le service de jugement et modèles de code de départ.
Les identifiants sont ceux de Judge0 CE.
"""

LANGUAGE_IDS = {
    "javascript": 63,  # Node.js 12.14.0
    "python": 71,      # Python 3.8.1
    "java": 62,        # OpenJDK 13.0.1
    "cpp": 54,         # GCC 9.2.0
    "c": 50,           # GCC 9.2.0
}

STARTER_TEMPLATES = {
    "javascript": (
        "const lines = require('fs').readFileSync(0, 'utf-8').split('\\n');\n"
        "\n"
        "// Votre code ici\n"
    ),
    "python": (
        "import sys\n"
        "\n"
        "\n"
        "def main():\n"
        "    data = sys.stdin.read().split()\n"
        "    # Votre code ici\n"
        "\n"
        "\n"
        "if __name__ == \"__main__\":\n"
        "    main()\n"
    ),
    "java": (
        "import java.util.Scanner;\n"
        "\n"
        "public class Main {\n"
        "    public static void main(String[] args) {\n"
        "        Scanner scanner = new Scanner(System.in);\n"
        "        // Votre code ici\n"
        "\n"
        "        scanner.close();\n"
        "    }\n"
        "}\n"
    ),
    "cpp": (
        "#include <iostream>\n"
        "using namespace std;\n"
        "\n"
        "int main() {\n"
        "    // Votre code ici\n"
        "    return 0;\n"
        "}\n"
    ),
    "c": (
        "#include <stdio.h>\n"
        "\n"
        "int main(void) {\n"
        "    /* Votre code ici */\n"
        "    return 0;\n"
        "}\n"
    ),
}


def is_supported(language: str) -> bool:
    return language in LANGUAGE_IDS


def starter_template(language: str) -> str:
    """Retourne le code de départ d'un langage, chaîne vide si inconnu."""
    return STARTER_TEMPLATES.get(language, "")
