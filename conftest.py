import io;

import pytest;
from hypothesis import HealthCheck, settings;

settings.register_profile(
    "ci",
    suppress_health_check = [HealthCheck.function_scoped_fixture],
    deadline = None,
);
settings.load_profile("ci");

BANK = """\
# AMR release (generated on Mon Jan 1, 2024 at 12:00:00)
# sample bank for tests

# ::id s1 ::date 2024-01-01
# ::snt The boy wants to go .
# ::tok The boy wants to go .
# ::alignments 1-0.0 2-0 4-0.1
(w / want-01
      :ARG0 (b / boy)
      :ARG1 (g / go-01
            :ARG0 b))

# ::id s2
# ::snt Barack Obama visited Paris .
# ::tok Barack Obama visited Paris .
# ::alignments 0-2|0.0+0.0.0+0.0.0.0+0.0.0.1 2-3|0 3-4|0.1+0.1.0+0.1.0.0
(v / visit-01
      :ARG0 (p / person
            :name (n / name :op1 "Barack" :op2 "Obama"))
      :ARG1 (c / city
            :name (n2 / name :op1 "Paris")))

# ::id s3
# ::tok broken
(x / this :ARG0 (y / is

# ::id s4
# ::snt Obama slept .
# ::tok Obama slept .
(s / sleep-01~e.1
      :ARG0 (p / person~e.0
            :name (n / name :op1 "Obama"~e.0)))
"""

@pytest.fixture
def bank():
    return io.StringIO(BANK);

@pytest.fixture
def example():
    return "(w / want-01 :ARG0 (b / boy~e.0) :ARG1 (g / go-01~e.2 :ARG0 b))", \
        ["boy", "wants", "to", "go"];
