"""
CodeMentor - Language Templates
Default code samples and editor metadata for every supported language.
"""

from typing import Dict

from codementor.models import SupportedLanguage


DEFAULT_LANGUAGE = SupportedLanguage.JAVASCRIPT


DEFAULT_CODE_SNIPPETS: Dict[SupportedLanguage, str] = {
    SupportedLanguage.JAVASCRIPT: """function fibonacci(n) {
  if (n <= 1) return n;
  return fibonacci(n - 1) + fibonacci(n - 2);
}

console.log("Fibonacci(10) =", fibonacci(10));""",
    SupportedLanguage.PYTHON: """def fibonacci(n):
    if n <= 1:
        return n
    return fibonacci(n - 1) + fibonacci(n - 2)

print(f"Fibonacci(10) = {fibonacci(10)}")""",
    SupportedLanguage.JAVA: """public class Main {
    public static int fibonacci(int n) {
        if (n <= 1) return n;
        return fibonacci(n - 1) + fibonacci(n - 2);
    }

    public static void main(String[] args) {
        System.out.println("Fibonacci(10) = " + fibonacci(10));
    }
}""",
    SupportedLanguage.PHP: """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>PHP Demo</title>
</head>
<body>
    <h1>Hello from PHP!</h1>
    <p>Current Server Time:</p>
    <?php
        date_default_timezone_set('UTC');
        echo "<h2>" . date("H:i:s") . "</h2>";

        $name = "CodeMentor";
        echo "<p>Welcome to $name</p>";
    ?>
</body>
</html>""",
    SupportedLanguage.HTML: """<!DOCTYPE html>
<html>
<head>
    <style>
        body { font-family: sans-serif; display: flex; justify-content: center; }
        .card { padding: 2rem; border-radius: 1rem; text-align: center; }
    </style>
</head>
<body>
    <div class="card">
        <h1>Hello CodeMentor!</h1>
        <p>This is an HTML, CSS &amp; JS demo.</p>
        <button onclick="changeText()">Click Me</button>
    </div>

    <script>
        function changeText() {
            document.querySelector('h1').innerText = 'JavaScript works!';
        }
    </script>
</body>
</html>""",
}


# Editor metadata per language
SUPPORTED_LANGUAGES: Dict[SupportedLanguage, Dict[str, str]] = {
    SupportedLanguage.JAVASCRIPT: {"extension": ".js", "name": "JavaScript", "editor": "javascript"},
    SupportedLanguage.PYTHON: {"extension": ".py", "name": "Python", "editor": "python"},
    SupportedLanguage.JAVA: {"extension": ".java", "name": "Java", "editor": "java"},
    SupportedLanguage.PHP: {"extension": ".php", "name": "PHP", "editor": "php"},
    SupportedLanguage.HTML: {"extension": ".html", "name": "HTML", "editor": "html"},
}


def get_template(language: SupportedLanguage) -> str:
    """Get the default code sample for a language."""
    return DEFAULT_CODE_SNIPPETS[SupportedLanguage(language)]


def get_supported_languages() -> Dict[SupportedLanguage, Dict[str, str]]:
    """Get editor metadata for every supported language."""
    return SUPPORTED_LANGUAGES
