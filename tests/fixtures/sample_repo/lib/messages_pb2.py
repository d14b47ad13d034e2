# Generated by the protocol buffer compiler.  DO NOT EDIT!
SET_DISCONNECTED = "set_disconnected"
