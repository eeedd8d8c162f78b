"""Apache provisioning package.

Submodules:
- vhost: section-based virtual-host config builder
- suexec: SuExec document-root allow-list
- site: site creation (vhost, CGI bridge, PHP FastCGI wrapper)
- ctl: a2enmod/a2ensite toggles and service restart
"""

# Intentionally minimal; logic lives in submodules, driven by hostprov.py.
