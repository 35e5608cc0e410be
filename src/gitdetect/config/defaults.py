"""Starter rule configuration written by ``gitdetect init``."""

SAMPLE_CONFIG_FILENAME = "gitdetect.conf.yaml"

SAMPLE_CONFIG_YAML = """\
# gitdetect detection rules
#
# Target    regexes that select a suspect value; a named group
#           (?P<suspect>...) narrows the reported value to that group
# Except    regexes searched against the whole line; any match vetoes the line
# Entropy   minimum Shannon entropy (bits/char) of the value, 0 = no check
# Tag       label written to the report
# ExploitFn optional verification hook, e.g. AWSSTSExploit

secret-detection-rules:
  - Target:
      - (?i)aws_?secret_?(?:access_?)?key\\s*[:=]\\s*['"]?(?P<suspect>[A-Za-z0-9/+=]{40})
    Except:
      - EXAMPLEKEY
    Entropy: 4.0
    Tag: AWS secret access key
    ExploitFn: AWSSTSExploit

  - Target:
      - -----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----
    Tag: Private key

  - Target:
      - (?i)(?:password|passwd|pwd)\\s*[:=]\\s*['"](?P<suspect>[^'"\\s]{8,})['"]
    Except:
      - (?i)(?:example|changeme|placeholder|\\$\\{)
    Entropy: 3.0
    Tag: Hardcoded password

  - Target:
      - (?i)(?:secret|token|api_?key)\\s*[:=]\\s*['"](?P<suspect>[A-Za-z0-9_\\-/+=]{20,})['"]
    Entropy: 4.0
    Tag: Generic secret

  - Target:
      - gh[pousr]_[A-Za-z0-9]{36}
    Tag: GitHub token
"""
