"""
Embedded license signing key.

The key below is the only authority for license signatures. It is loaded
once per process and handed to the verifier explicitly.
"""

from functools import lru_cache

from .verifier import TrustAnchor

ENTERPRISE_LICENSE_PUBLIC_KEY = """\
-----BEGIN PGP PUBLIC KEY BLOCK-----
Version: GnuPG v1.4.11 (GNU/Linux)

mQINBE5nn7MBEADCOdc1mB2eXj0UYNfHJ4KExHYPK8Wak8JITh/L/+ghUNtrseRl
C8ukF9N/cfvM4bMl4R0GohYCPiwUkbzqq+NgxZnjObRdQhXxvVMK50e75vZH5a2b
QOrPYPOgwZoNtj/iFXv8VrVm5jWxZBWIyNoc4EnbNb98g/T6znxn22fKe5MjH/6+
OGHo64uqswGNqXyiQavc9GRahjaf9j4LB/qmVj9QDyoPrRN8w9FXb9yqP+0pGyfs
jqFEQweaoHCHN+fEw3GWLxdfUK/sFvfSbDPXuZIlFSk/QW/Y2RfRCsgvSvva/oPs
AMQbnXh/T2p/vNIDnEr562JtOS/GNQV3zaV8kVcpXIQ+In16KQNagd/o5Gy+vi/d
ivepAw4s1qOG0U6Kx5Fueqsqd6cM5x3Thf2Elmf6aqE1ouXtk2QYb+UrSg4XmA8t
9Vw/b9EmhwB5Sy0199Cdt1+YinwTLVSsjqqOTIKsGs+adThzzVZb3m9BwErP/3+i
hvhF20no0nW2VQlQ3fyjfwpJR/QwVGs1t1qViGKoAmi7gVg0ozeZ34/Y4NmBLEut
1xnhMSLUpchOUbrPChDQtQ+rtX2RNRLhgJp5FIjCRMyFOvdNPkVftLWN7Nq1YLE6
urVQ5+xr2pkgZYnplYIfwjIy+D/CXlsmsDwtJuIEg/rDkhGG1hClEiMl6QARAQAB
tEtDbG91ZGVyYSBVbml0IFRlc3RzIChUaGlzIGlzIGEga2V5IGZvciB0ZXN0aW5n
IHB1cnBvc2VzKSA8ZW5nQGNsb3VkZXJhLmNvbT6JAjgEEwECACIFAk5nn7MCGwMG
CwkIBwMCBhUIAgkKCwQWAgMBAh4BAheAAAoJEFrC2ATt5goQtRUP/1s1WtmnRn0T
j77eaZ2r6Oyxg5G8rwMoT8T2E69oDC9Vzn9PSQKWoBn7cG6SQTtYhwVkWGbAm+M8
vzy4KVqnlm3DSLLEhvtdST+qG1XakEyjOJzongbWwrPSbu/qT0UBla6OOFEZALQO
hl6sfnWdGwvc2j+DcHTzJbx33pGmE5aJf1LqNWt0BleWdRlg4nU9yR2DRmt8nw41
LorvS5tX5Jazjo1OiJllJOAFkKya9sW2tvApM5AIItxQ7wnGpcPzkq+3osXETVt5
RzqNdgcz3d3AZaYaOYb10uWbwEQBuOJ8DqzN7Z0Ui5JkCwS7d+sUJfVxrpycEmGw
MLqTEsYWZPsOx8kDWsn9rfQWJSCMccT3UmroUozZZU+g5ivn8/IuBzazk55qc0L0
5IUh3rkTTHMFev/0DqoecdbUVlIkttMVXuCV0klSpO30splLewvtDpoabDWteFto
HXOOEBGifckGsE+SjjzTbbf9dyixbALw+YQM4MvFhwFlEa/tehAanFfqoLn6SCFy
u6TmRsCyVi7ewV5tsd2esD5F6JMvNogdVlWOmaOVksC8Pn4DQLB7s50sFe9Ks1BH
Sxnxp0iBAhz4W2+5jQ29hCExvGXGF6gftYllu4VWh66wkT+dLkgIvggpHByONbqm
z1U9dpCSSrB+TaH23yCtlDyMlr4ybxzquQINBE5nn7MBEADDSIbGBXJLOQVvUDly
dSwvhypg5mouCXieLuf8xbRESDgXVpf14pAHemaXYFQtHGGZWKAKpsZyZjPYrX3m
Sm2Ro9r5Qdm80bM+78ZpWerVS7SxdoazGw8sVlR58ybcExJWGZ2I1ROKpFdjowgF
Yc46FAN9uqZk+1Bqx297EAeZb/K8ebXb0PvRqkq5kyGVsqCTiXaS9EwWPB3gYnn/
YYsEdl9nmBeIhkg7ta/yHRkndG7vxpSNAPT54yYcONoSkwtK99/h6k3Nqu0Y5ubG
DOJDXbpggMe2TmY7NI71weRNCFERPzpis+Tz0LePlA6AB/xxsVsuxCSciqcuCPJw
iJHvp4fNz4pF7C6M/OLAHUIE1mebBS0Hb2BAabjwW+dKDgirdlVURn4D/g61eRN2
YSO6YKdJYO7/liCd9+p1kv7Q854MqdK0csn7/Uen1ypFEf5kPeeh9bIk49W0YaSh
8UbpG7uf3kfbKkgpsew/Zy1tUTSrP5lRQG4sqCPXSkqMhc+Kt9TLkcx6vzRuh3YK
qKf03HcmHFTQVGLx4QzUUTS0W1DIztc7dOSS115qyNLWD4Wi0ewNsXMKcKyEFo8x
udJV91Pxfp+1UqiFuTdiImMQKTaKumaAdzl2WvrYTNKqFmth/Q2H4l+McTuJeI1R
edxKyDe8PyCPTpbe6A0Y91y1RwARAQABiQIfBBgBAgAJBQJOZ5+zAhsMAAoJEFrC
2ATt5goQ3jMP/08alXMmA4OsrKuDTa4jB2d0c5I3sbqoD0HoW30ZQq4j4ruNbyAH
tP5nlg+CfT1SDoj9GdNn/3agn+rI0dP4+EmQYXrQhykGawr5hU+jtrd7HoiDYyRO
FJ2J49HnbVibPVgDuHeu0nrsyQrcrSBb9Rxoo0kliVKR52b0yLOhzdug2/B2H9N2
Gj/Pfh89AHsNoAkppOAJ5qa2yhcCq/zZU8q23w3gXjfyoB0bKROV3ogS+7X7kP3Z
hSGt6VoukPAJIHsujVonsZXTou4F0HeItvF8tmHs82iG0jU13H35UcNgpWpiuivp
46oXY4rqNvMNczDMUimMawzANCQqjPVfzXGMcuxK1xN7PwuRw652x6Te263NyFy0
fsZ56BDS0ga6jj+CeBDfIjs4W0z1l8EWc82bK2Nz5raEzajL2IYf3q2T3No9/ExG
wY2hydqjA5nlDB/RBOKhOya0cRnWvbaQBHubG9pok63NuCNE+HOUMJ2RjrSTolex
B5AbnwI/kf27gJnVnmrKMYClbYiCeURsvmlqo0XGZJfWmF4aARUA6bfQ1B/sgZzB
rnqRSz6lKGFzauX55ylWOvEPP2VpQVr6IYzXcZH4+PHub6MSt867jJAg9ny+uejt
9CDOBx3hc7LUppcUzbMpIQWW+gKPqX4t6YdL7FHaxtW6MKVkpZOMEtp0mI0EToSh
dwEEAJ4ETWCNu0fbAWIl/vkXKf9M7MgX/pX2RPOq9uqkDqyP5kwpJXSgYKrd1VVN
CdAzndI87EC+AZIhO776287r8d+KS4Hf/EsnCtVco/L6cKY5cpqR8a0AIJ48fZpR
DfJcioQ4JFRpZw4mulIehFdIPhjXaWxYP3LlZ4AMBl7jkRWfABEBAAG0QUNsb3Vk
ZXJhIExpY2Vuc2luZyAoTGljZW5zZSBTaWduaW5nIEtleSkgPGxpY2Vuc2luZ0Bj
bG91ZGVyYS5jb20+iLgEEwECACIFAk6EoXcCGy8GCwkIBwMCBhUIAgkKCwQWAgMB
Ah4BAheAAAoJEPLZ8LCLzgVJFrsD+wSLCtW9mmv4a/subnXMG7Bs7EWCDXEYfLac
ELzEryhdEUuyGonv7S3Ul+2m6fOkEXV1hQeG9gnFnEPhP/S4f6PjWrXtwZV0EJ7g
RA88W/gYtDeXXV1AneF81Sm9mqAeBXVDio9WuajlRWy63n8fDmV6UGDKwIZzrlaj
l+CyqpyimQINBE6WZT4BEAC6SQUZIV6DqbpiX9YHYy2VrwDi88RWTzMq7+KX6jEf
AJCEnYC4/Ae/73fQj15zTnwunOQF6wi970uvlfjoDgtmMgCrs3iyhPP4MTNhA0Cp
3jIutzBo6sxRrG3NnBduu8TVT4QnR42rxH6uCRHMC0W+oTBdI0k4joF7XSOdc5M/
KhvLCU0Ey77W6vb/uL45Nbn9RD7/1BL2zQUvBd940luoqyeV+nlDgMTz4tUzaUaU
nyz94JCTD8kcaE7c1Vj2oBCe6qMU7efBr++XEe4Z0d7mGdGoPA0MBxTY3rAI8wud
SThWBr8KsQGQM6iyPqzUl4xppPENXuWw2S4qUyxyuwOQDiR5nmlSW960uHYAbM8m
s5J7wtxIwJvjRqJirMtfViPWDVkxGP4QuXBDDwOS9R8S69kdjRLvL7hruASdicFs
G8tRqZbILg6xA5UeocrYUJAqLNbsL3c66GZ5rwWJSZLVzPHVCpl/7hk2JF1CI2JF
4AqfU8ixnpPyG+MWPGeC2Ce6YaJaMC4+G9zUNrEWXi7mTq30GrHiDX8H58alIE1F
5m61K14GnKg8J3zvKXNdSfYWHlVqM9HeiqXu/H7uLpVTMjk31Shk+xp1/Kxv7Fj5
ee418SxSOpC9XOwi4esX7L8d+dnjf7nxWhz0E3T1zZ0GDZpul9ys0dfepN96GJ0T
wQARAQABtFdDbG91ZGVyYSBFbnRlcnByaXNlIExpY2Vuc2luZyAoRW50ZXJwcmlz
ZSBMaWNlbnNlIFNpZ25pbmcgS2V5KSA8bGljZW5zaW5nQGNsb3VkZXJhLmNvbT6J
AjYEEwECACAFAk6WZT4CGwMGCwkIBwMCBBUCCAMEFgIDAQIeAQIXgAAKCRAl8EVy
5h/LZavID/0UfpBpJ9DuRW9Rn5wpObKBXU25suhJfiYVQomlMKdixd09DcBNP1aO
6cVOHtpe1DQ6DXwCvkCc/FPDwG2LGGYfxyuxJVu3x/GBITCOIxqhojvWPGKRsGQH
2ciEZyzsSsDxU/smsrFjuYPe3yA1k4Vlb+fLCHd/urZMjmC5zLcLmTbDvIi1FxEA
l4VJG2kLNUV2RSU/1BAPDag4MFE96vNIOUmsKWA4Rgc/MWUkCiRqBGvFq8fChcT7
eFPOjhzd+1sCsMION3ngl+JMswT/8PyipPBjobfWk9BlpT8Ci85yy94qF0+gfHUD
Wm4AnqmAmxww1n6wv/bo3RaN+hIb4bhTqz+QEODI2R4fcjpZj+YPORIK8YZORi5H
CEjs2cV0qwiZ/9UgPPf/tO+FARV3swZ/WJB8gaUKD55oqgZHiP/CEz8ENjSjo459
uAhJOohUdJhLylQHGo0tZBzI04uWhhI3zCixZ9gUIxr/42w1Y3MGXugqvO1zUhnf
A3lKopJAFXNRcpciLXhU6edXTxLUF+Sr+qyyW5DqFD1t1Js3OmsjP25wUpGs/GmS
dV5+mOd4dslW1phozkh+CMLD79lRTHs6OKS+/McR0omCtucJDEkx5z9BrEtRQDC4
5NMoVQRvH6X/IfTt58hF66fuaqyEX32uS6uLdGGAJ//V6dLyQxWujw==
=TmBA
-----END PGP PUBLIC KEY BLOCK-----
"""


@lru_cache(maxsize=None)
def default_trust_anchor() -> TrustAnchor:
    """Parsed ENTERPRISE_LICENSE_PUBLIC_KEY, shared by all checks."""
    return TrustAnchor.from_armored(ENTERPRISE_LICENSE_PUBLIC_KEY)
