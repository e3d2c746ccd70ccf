import pytest

# A program touching every production of the grammar.
COVERING_SOURCE = '''
let a = 1, b, c = "str";
;
{ let inner = 'x'; }
def f(x, y) { return x * (y + 1); }
def g() { return; }
if (a < 2 && !false || null) f(1, 2); else { a += 3; }
if (a) if (b) a; else b;
while (a <= 10) a = a + 1;
do { a -= 1; } while (a >= 5);
for (let i = 0; i != 3; i += 1) { c = c + str(i); }
for (a = 0; a < 1;) a /= 2;
for (;;) {}
g()(1);
b = -a * 2 / 4 - +3 > 1 == true;
banao u = Sahi; Agr (u) WapisBhejo; Warna JabTak (ghalat) karo ; jabTak (u);
print(1.5, 20, 'q')
'''


@pytest.fixture
def covering_source():
    return COVERING_SOURCE
