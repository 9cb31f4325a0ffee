"""Shared fixtures for core unit tests"""

import pytest

from wxpub.core.parse import parse_text


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text and a [link](https://example.com).

## Heading 2

- item one
- item two
- [x] done
- [ ] todo

| A | B |
|---|---|
| 1 | 2 |

```python
print("hello")
```

---

> Quoted.
"""

SAMPLE_FM_MD = """\
---
title: "Front Title"
author: someone
---

# Body Title

Body content.
"""


@pytest.fixture(name="sample")
def sample_fixture():
    return parse_text(SAMPLE_MD)


@pytest.fixture(name="sample_fm")
def sample_fm_fixture():
    return parse_text(SAMPLE_FM_MD)
