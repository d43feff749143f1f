"""LICENSE and README file templates."""

from __future__ import annotations

from datetime import date

LICENSE_TYPES = ("MIT", "Apache-2.0", "GPL-3.0")

_MIT = """MIT License

Copyright (c) {year} {owner}

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

_APACHE = """Apache License
Version 2.0, January 2004

Copyright {year} {owner}

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
"""

_GPL = """GNU GENERAL PUBLIC LICENSE
Version 3, 29 June 2007

Copyright (C) {year} {owner}
"""

_LICENSES = {"MIT": _MIT, "Apache-2.0": _APACHE, "GPL-3.0": _GPL}

_README = """# {title}

{description}

## Installation

```bash
git clone https://github.com/{owner}/{repo}.git
cd {repo}
```

## Usage

Add usage instructions here.

## Contributing

Contributions are welcome! Please feel free to submit a Pull Request.

## License

This project is licensed under the {license_name} License - see the [LICENSE](LICENSE) file for details.

## Contact

Created by [@{owner}](https://github.com/{owner})
"""


def render_license(license_type: str, owner: str, year: int | None = None) -> str:
    """Render a license body; unknown types fall back to MIT."""
    template = _LICENSES.get(license_type, _MIT)
    return template.format(year=year or date.today().year, owner=owner)


def render_readme(
    owner: str,
    repo: str,
    title: str | None = None,
    description: str | None = None,
    license_name: str | None = None,
) -> str:
    return _README.format(
        title=title or repo,
        description=description or "A description of this project.",
        owner=owner,
        repo=repo,
        license_name=license_name or "MIT",
    )
