"""Command line front end for the bot registry."""
