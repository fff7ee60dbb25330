# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Next-version resolution and build identity for CI pipelines."""
