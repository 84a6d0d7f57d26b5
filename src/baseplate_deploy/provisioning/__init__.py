"""
baseplate_deploy.provisioning

Stack declarations, descriptors and the registrants that apply them.
"""

# Package marker.
