# `name` is the name of the package as used for `pip install package`
name = "vecinfo"
# `path` is the name of the package for `import package`
path = name.lower().replace("-", "_").replace(" ", "_")
# Your version number should follow https://python.org/dev/peps/pep-0440 and
# https://semver.org
author = "The vecinfo developers"
author_email = ""
description = "Diagnostic reports on layers of geospatial vector data sources"  # One-liner
url = "https://github.com/vecinfo/vecinfo"  # your project home-page
license = "GNU General Public License version 3"  # See https://choosealicense.com
version = "0.1.0"
